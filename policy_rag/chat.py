"""
Insurance chat flow

1. Take the last user message as the query
2. Rank all stored sections against it (lexical, top 3)
3. Forward the best sections as context in the system prompt
4. Send the prompt plus the most recent turns to the generator
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .generation import BaseGenerator, build_system_prompt
from .lexical import RelevanceRanker
from .models import ChatMessage, QueryMatch
from .store import PolicyStore

logger = logging.getLogger(__name__)


@dataclass
class ChatAnswer:
    content: str
    matches: List[QueryMatch] = field(default_factory=list)  # Context forwarded to the model


class ChatService:
    """Retrieval-augmented insurance Q&A"""

    def __init__(
        self,
        store: PolicyStore,
        generator: BaseGenerator,
        ranker: Optional[RelevanceRanker] = None,
        context_sections: int = 2,
        history_messages: int = 3,
    ):
        """
        Args:
            store: Source of all policy sections
            generator: Answer generator
            ranker: Section ranker (default: top 3)
            context_sections: Ranked sections forwarded to the generator
            history_messages: Most recent messages forwarded to the generator
        """
        if context_sections < 0 or history_messages < 1:
            raise ValueError("context_sections must be >= 0 and history_messages >= 1")
        self.store = store
        self.generator = generator
        self.ranker = ranker or RelevanceRanker()
        self.context_sections = context_sections
        self.history_messages = history_messages

    async def find_context(self, query: str) -> List[QueryMatch]:
        """Rank stored sections and keep the ones forwarded as context"""
        matches = await self.ranker.rank_from_store(query, self.store)
        logger.info(f"Found {len(matches)} candidate sections")
        for match in matches:
            logger.info(
                f"Section '{match.section.title}': score={match.score}, "
                f"matched_keywords={match.matched_keywords}, content={len(match.section.content)} chars"
            )
        return matches[:self.context_sections]

    async def answer(self, messages: Sequence[ChatMessage]) -> ChatAnswer:
        """
        Answer the last user message

        Args:
            messages: Conversation so far, oldest first

        Returns:
            ChatAnswer with generated text and the context sections used

        Raises:
            ValueError: Empty conversation or empty last message
        """
        if not messages:
            raise ValueError("messages must contain at least one message")

        query = messages[-1].content
        if not query or not query.strip():
            raise ValueError("last message has no content")

        logger.info(f"Chat query: {query}")

        context = await self.find_context(query)
        system_prompt = build_system_prompt(context)

        recent = list(messages[-self.history_messages:])
        content = await self.generator.generate(system_prompt, recent)

        return ChatAnswer(content=content, matches=context)
