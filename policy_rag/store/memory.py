"""In-process policy store for local runs and tests"""

import asyncio
import copy
import logging
from datetime import datetime
from typing import List

from ..models import PolicyDocument, Section
from .base import PolicyStore

logger = logging.getLogger(__name__)


class InMemoryPolicyStore(PolicyStore):
    """
    Keeps policies and sections in lists.

    Stored records are copies, so callers mutating their objects after
    insert do not change what the store returns.
    """

    def __init__(self):
        self._policies: List[PolicyDocument] = []
        self._sections: List[Section] = []
        self._lock = asyncio.Lock()

    async def insert_policy(self, policy: PolicyDocument) -> int:
        async with self._lock:
            policy.id = len(self._policies) + 1
            policy.created_at = datetime.now()
            stored = copy.copy(policy)
            stored.sections = []
            self._policies.append(stored)
            return policy.id

    async def insert_section(self, policy_id: int, section: Section) -> int:
        async with self._lock:
            section.id = len(self._sections) + 1
            section.policy_id = policy_id
            stored = copy.copy(section)
            stored.keywords = list(section.keywords)
            self._sections.append(stored)
            return section.id

    async def fetch_all_sections(self) -> List[Section]:
        async with self._lock:
            return [copy.copy(section) for section in self._sections]

    async def list_policies(self) -> List[PolicyDocument]:
        async with self._lock:
            return [copy.copy(policy) for policy in reversed(self._policies)]
