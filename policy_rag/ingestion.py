"""
Policy ingestion pipeline

extract text -> metadata -> store policy -> segment -> store sections

Policy insert failures abort the upload. Section inserts are independent:
a failing section is logged and skipped, the rest are still stored.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .document_processor import DocumentProcessor
from .exceptions import EmptyDocumentError
from .models import PolicyDocument
from .sections import extract_metadata, segment
from .store import PolicyStore

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    policy: PolicyDocument
    section_count: int
    stored_sections: int
    failed_sections: List[str] = field(default_factory=list)  # Titles of sections that failed to store


class PolicyIngestor:
    """Turns an uploaded file into a stored policy with sections"""

    def __init__(self, processor: DocumentProcessor, store: PolicyStore):
        self.processor = processor
        self.store = store

    async def ingest(self, file_content: bytes, filename: str) -> IngestionResult:
        """
        Ingest one policy document

        Args:
            file_content: Uploaded file bytes
            filename: Original filename (title source, type by extension)

        Returns:
            IngestionResult with the stored policy and section counts

        Raises:
            TextExtractionError: Extraction failed
            EmptyDocumentError: Extraction produced no text
            Exception: Policy insert failures from the store propagate unchanged
        """
        file_type = Path(filename).suffix or "pdf"

        logger.info(f"Processing policy: {filename}")
        text = await asyncio.to_thread(self.processor.extract_text, file_content, file_type)
        logger.info(f"Extracted {len(text)} chars")
        logger.debug(f"Text sample (first 500 chars): {text[:500]}")

        if not text.strip():
            raise EmptyDocumentError(f"Could not extract text from {filename}")

        metadata = extract_metadata(filename, text)
        logger.info(
            f"Metadata: title='{metadata.title}', version={metadata.version}, "
            f"effective_date={metadata.effective_date.date().isoformat()}"
        )

        policy = PolicyDocument(
            title=metadata.title,
            version=metadata.version,
            effective_date=metadata.effective_date,
        )
        policy_id = await self.store.insert_policy(policy)
        logger.info(f"Stored policy #{policy_id}: {policy.title}")

        sections = segment(text)
        policy.sections = sections

        stored = 0
        failed: List[str] = []
        for section in sections:
            try:
                await self.store.insert_section(policy_id, section)
                stored += 1
                logger.debug(f"Stored section '{section.title}' keywords={section.keywords}")
            except Exception as e:
                logger.error(f"Failed to store section '{section.title}' (order={section.order}): {e}")
                failed.append(section.title)

        logger.info(f"Stored {stored}/{len(sections)} sections for policy #{policy_id}")

        return IngestionResult(
            policy=policy,
            section_count=len(sections),
            stored_sections=stored,
            failed_sections=failed,
        )
