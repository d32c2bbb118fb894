"""
Unit tests for the policy ingestion pipeline.
"""

from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest

from policy_rag.document_processor import DocumentProcessor
from policy_rag.exceptions import EmptyDocumentError, TextExtractionError
from policy_rag.ingestion import PolicyIngestor
from policy_rag.store import InMemoryPolicyStore

pytestmark = pytest.mark.unit


class FlakySectionStore(InMemoryPolicyStore):
    """Fails to store sections with the given titles"""

    def __init__(self, failing_titles):
        super().__init__()
        self.failing_titles = set(failing_titles)

    async def insert_section(self, policy_id, section):
        if section.title in self.failing_titles:
            raise RuntimeError(f"constraint violation on '{section.title}'")
        return await super().insert_section(policy_id, section)


def make_processor(text):
    processor = Mock()
    processor.extract_text.return_value = text
    return processor


class TestPolicyIngestor:

    async def test_ingest_sample_policy(self, sample_policy_text, memory_store):
        processor = make_processor(sample_policy_text)
        ingestor = PolicyIngestor(processor, memory_store)

        result = await ingestor.ingest(b"raw bytes", "상해보험약관.pdf")

        processor.extract_text.assert_called_once_with(b"raw bytes", ".pdf")
        assert result.policy.id == 1
        assert result.policy.title == "상해보험약관"
        assert result.policy.version == "2.3"
        assert result.policy.effective_date == datetime(2024, 1, 15)
        assert result.section_count == 8
        assert result.stored_sections == 8
        assert result.failed_sections == []

        stored = await memory_store.fetch_all_sections()
        assert [s.order for s in stored] == list(range(8))
        assert all(s.policy_id == 1 for s in stored)
        assert stored[2].title == "목적"

    async def test_file_type_from_extension(self, memory_store):
        processor = make_processor("제1장 총칙\n내용")
        await PolicyIngestor(processor, memory_store).ingest(b"x", "policy.txt")
        processor.extract_text.assert_called_once_with(b"x", ".txt")

    async def test_missing_extension_defaults_to_pdf(self, memory_store):
        processor = make_processor("제1장 총칙\n내용")
        await PolicyIngestor(processor, memory_store).ingest(b"x", "policy")
        processor.extract_text.assert_called_once_with(b"x", "pdf")

    async def test_policy_listed_after_ingest(self, sample_policy_text, memory_store):
        ingestor = PolicyIngestor(make_processor(sample_policy_text), memory_store)
        await ingestor.ingest(b"x", "a.pdf")

        policies = await memory_store.list_policies()
        assert [p.title for p in policies] == ["a"]
        assert policies[0].version == "2.3"

    @pytest.mark.parametrize("text", ["", "   \n\t\n"])
    async def test_blank_text_rejected(self, memory_store, text):
        ingestor = PolicyIngestor(make_processor(text), memory_store)

        with pytest.raises(EmptyDocumentError):
            await ingestor.ingest(b"x", "blank.pdf")

        assert await memory_store.list_policies() == []

    async def test_extraction_errors_propagate(self, memory_store):
        processor = Mock()
        processor.extract_text.side_effect = TextExtractionError("broken")

        with pytest.raises(TextExtractionError):
            await PolicyIngestor(processor, memory_store).ingest(b"x", "broken.pdf")

    async def test_policy_insert_failure_aborts(self, sample_policy_text):
        store = Mock()
        store.insert_policy = AsyncMock(side_effect=ConnectionError("database unreachable"))
        store.insert_section = AsyncMock()

        with pytest.raises(ConnectionError):
            await PolicyIngestor(make_processor(sample_policy_text), store).ingest(b"x", "a.pdf")

        store.insert_section.assert_not_called()

    async def test_failing_section_is_skipped(self, sample_policy_text):
        store = FlakySectionStore(failing_titles=["용어의 정의"])
        ingestor = PolicyIngestor(make_processor(sample_policy_text), store)

        result = await ingestor.ingest(b"x", "a.pdf")

        assert result.section_count == 8
        assert result.stored_sections == 7
        assert result.failed_sections == ["용어의 정의"]

        stored = await store.fetch_all_sections()
        assert "용어의 정의" not in [s.title for s in stored]
        assert [s.order for s in stored] == [0, 1, 2, 4, 5, 6, 7]


class TestPdfIngestion:
    """Real PyMuPDF extraction feeding segmentation"""

    async def test_text_layer_pdf_sections(self, memory_store, make_pdf):
        ingestor = PolicyIngestor(DocumentProcessor(), memory_store)

        result = await ingestor.ingest(make_pdf(), "accident_policy.pdf")

        assert result.policy.title == "accident_policy"
        assert result.policy.version == "3.0"
        assert result.section_count == 3
        stored = await memory_store.fetch_all_sections()
        assert [(s.title, s.order) for s in stored] == [
            ("General", 0),
            ("Claims", 1),
            ("Exclusions", 2),
        ]
        assert "claim" in stored[1].keywords
