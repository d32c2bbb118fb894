"""
Abstract base class for answer generators.

All generators must implement this interface to be swappable.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import ChatMessage


class BaseGenerator(ABC):
    """Turns a system prompt plus recent conversation turns into an answer"""

    @abstractmethod
    async def generate(self, system_prompt: str, messages: List[ChatMessage]) -> str:
        """
        Generate the assistant reply.

        Args:
            system_prompt: Instructions including retrieved policy context
            messages: Recent conversation turns, oldest first, ending with the user question

        Returns:
            Answer text
        """

    @abstractmethod
    def get_model_info(self) -> dict:
        """
        Get information about the generation model.

        Returns:
            Dict with keys: name, type, parameters
        """

    def close(self):
        """Optional cleanup (close API clients etc.)"""
        pass
