"""
Domain records for policy ingestion and retrieval.

Section        - one titled span of a policy document (unit of storage and retrieval)
PolicyDocument - one ingested policy with its metadata and ordered sections
QueryMatch     - ephemeral ranking result pointing at a stored Section
ChatMessage    - one turn of a chat conversation
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal, Optional


@dataclass
class Section:
    """Titled, contiguous span of a policy document"""
    title: str
    content: str                 # Raw lines (each ending with "\n"), heading line included
    order: int                   # Zero-based discovery order within the document
    keywords: List[str] = field(default_factory=list)  # Filled when the section is closed
    id: Optional[int] = None
    policy_id: Optional[int] = None


@dataclass
class PolicyDocument:
    """Ingested insurance policy"""
    title: str
    version: str
    effective_date: datetime
    sections: List[Section] = field(default_factory=list)
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class QueryMatch:
    """Section scored against a user query"""
    section: Section
    score: float
    matched_keywords: List[str] = field(default_factory=list)


@dataclass
class ChatMessage:
    role: Literal["user", "assistant"]
    content: str
