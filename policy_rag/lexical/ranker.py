"""
Rule-based relevance ranking of policy sections against a free-text query.

Score (additive, no normalization):
    score = 10 × keyword_overlap
          + 50 if the raw query is a substring of the section title
          + 5 × context_relevance(content, query)
          + max(0, 10 - section.order)

Context relevance:
    +15 per key policy phrase found in content (only for compensation/claim questions)
    +10 "when" question  and content describes cases      (언제 / 경우)
    +10 "how much" question and content has % or won amounts (얼마 / \\d+% | \\d+원)
    +10 "how" question   and content describes a procedure (어떻게 / 절차)
"""

import logging
import re
from typing import List, Sequence

from ..models import QueryMatch, Section
from ..store.base import PolicyStore
from .keywords import extract_keywords

logger = logging.getLogger(__name__)

KEYWORD_MATCH_POINTS = 10
TITLE_MATCH_POINTS = 50
CONTEXT_MULTIPLIER = 5
POSITION_WEIGHT_MAX = 10
DEFAULT_TOP_K = 3

KEY_PHRASE_POINTS = 15
QUESTION_TYPE_POINTS = 10

# Sentences that state a policy decision
KEY_PHRASES = (
    '보험금을 지급하지 않습니다',
    '보상하지 않습니다',
    '보험금을 지급합니다',
    '보상합니다',
    '계약을 해지할 수 있습니다',
)

# Key phrases only count when the question is about compensation or claim money
KEY_PHRASE_TRIGGERS = ('보상', '보험금')

_AMOUNT_PATTERN = re.compile(r'\d+%|\d+원')


def context_relevance(content: str, query: str) -> int:
    """
    Score how well section content fits the kind of question asked.

    Args:
        content: Section content
        query: Raw user query

    Returns:
        Unscaled context score (multiplied by 5 by the ranker)
    """
    score = 0

    if any(trigger in query for trigger in KEY_PHRASE_TRIGGERS):
        for phrase in KEY_PHRASES:
            if phrase in content:
                score += KEY_PHRASE_POINTS

    if '언제' in query and '경우' in content:
        score += QUESTION_TYPE_POINTS
    if '얼마' in query and _AMOUNT_PATTERN.search(content):
        score += QUESTION_TYPE_POINTS
    if '어떻게' in query and '절차' in content:
        score += QUESTION_TYPE_POINTS

    return score


def matched_keywords(section: Section, query_keywords: Sequence[str]) -> List[str]:
    """Section keywords that also occur in the query keywords (section order)"""
    return [keyword for keyword in section.keywords if keyword in query_keywords]


def position_weight(order: int) -> int:
    """Linear bonus for early sections: 10 for the first, 0 from the 11th on"""
    return max(0, POSITION_WEIGHT_MAX - order)


def relevance_score(section: Section, query_keywords: Sequence[str], query: str) -> float:
    """
    Compute the additive relevance score of one section.

    Args:
        section: Candidate section (keywords already extracted)
        query_keywords: Keywords extracted from the query
        query: Raw user query (used for substring tests)

    Returns:
        Non-negative relevance score

    Example (2 keywords (20) + title (50) + first section (10)):
        >>> section = Section(title="보험금 지급 절차", content="...", order=0,
        ...                   keywords=["보험금", "지급"])
        >>> relevance_score(section, ["보험금", "지급", "절차"], "보험금 지급 절차")
        80.0
    """
    score = 0.0

    # List membership count (not a set intersection)
    score += len(matched_keywords(section, query_keywords)) * KEYWORD_MATCH_POINTS

    if query in section.title:
        score += TITLE_MATCH_POINTS

    score += context_relevance(section.content, query) * CONTEXT_MULTIPLIER

    score += position_weight(section.order)

    return score


class RelevanceRanker:
    """
    Lexical section ranker.

    Stateless apart from its configuration, so a single instance can serve
    concurrent requests.
    """

    def __init__(self, top_k: int = DEFAULT_TOP_K):
        """
        Args:
            top_k: Maximum number of matches returned by rank()
        """
        if top_k < 1:
            raise ValueError(f"top_k must be >= 1, got {top_k}")
        self.top_k = top_k

    def rank(self, query: str, sections: Sequence[Section]) -> List[QueryMatch]:
        """
        Score every section against the query and return the best matches.

        Args:
            query: Raw user query
            sections: All candidate sections

        Returns:
            Up to top_k QueryMatch objects, sorted by descending score.
            Ties keep the input order.
        """
        query_keywords = extract_keywords(query)
        logger.debug(f"Query keywords: {query_keywords}")

        candidates = [
            QueryMatch(
                section=section,
                score=relevance_score(section, query_keywords, query),
                matched_keywords=matched_keywords(section, query_keywords),
            )
            for section in sections
        ]

        # sorted() is stable: exact ties keep the original order
        ranked = sorted(candidates, key=lambda match: match.score, reverse=True)

        logger.debug(f"Ranked {len(candidates)} sections, returning top {min(self.top_k, len(ranked))}")
        return ranked[:self.top_k]

    async def rank_from_store(self, query: str, store: PolicyStore) -> List[QueryMatch]:
        """
        Fetch all stored sections and rank them.

        Store failures propagate unchanged; no partial ranking is attempted.

        Args:
            query: Raw user query
            store: PolicyStore providing fetch_all_sections()
        """
        sections = await store.fetch_all_sections()
        return self.rank(query, sections)
