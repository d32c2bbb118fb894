"""
Abstract document store for policies and their sections.

Implementations must be swappable: the ingestion and chat flows only see
this interface, and the concrete store is created once at startup and
injected into them.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models import PolicyDocument, Section


class PolicyStore(ABC):
    """Persistence for PolicyDocument / Section records"""

    async def connect(self):
        """Open connections (optional)"""

    async def disconnect(self):
        """Release connections (optional)"""

    @abstractmethod
    async def insert_policy(self, policy: PolicyDocument) -> int:
        """
        Store policy metadata (sections are inserted separately).

        Returns:
            New policy id
        """

    @abstractmethod
    async def insert_section(self, policy_id: int, section: Section) -> int:
        """
        Store one section linked to a policy.

        Returns:
            New section id
        """

    @abstractmethod
    async def fetch_all_sections(self) -> List[Section]:
        """All stored sections, unfiltered"""

    @abstractmethod
    async def list_policies(self) -> List[PolicyDocument]:
        """Stored policies without sections, newest first"""
