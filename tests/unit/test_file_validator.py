"""
Unit tests for FileValidator

Two tiers:
1. STRICT (PDF): Magic bytes validation, corruption detection
2. LENIENT (text/Markdown): UTF-8 validation
"""

import pytest

from policy_rag.file_validator import FileValidator, ValidationError

pytestmark = pytest.mark.unit

# Minimal one-page PDF
MINIMAL_PDF = (
    b"%PDF-1.4\n"
    b"1 0 obj\n<< /Type /Catalog /Pages 2 0 R >>\nendobj\n"
    b"2 0 obj\n<< /Type /Pages /Kids [3 0 R] /Count 1 >>\nendobj\n"
    b"3 0 obj\n<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>\nendobj\n"
    b"xref\n0 4\n"
    b"0000000000 65535 f\n"
    b"0000000009 00000 n\n"
    b"0000000058 00000 n\n"
    b"0000000115 00000 n\n"
    b"trailer\n<< /Size 4 /Root 1 0 R >>\n"
    b"startxref\n198\n%%EOF"
)


@pytest.fixture
def validator():
    """Create FileValidator instance"""
    return FileValidator()


class TestStrictValidation:
    """PDF uploads - fail fast on mismatch"""

    def test_valid_pdf(self, validator):
        result = validator.validate("약관.pdf", MINIMAL_PDF)
        assert result.format_type == "pdf"
        assert result.mime_type == "application/pdf"
        assert result.page_count == 1

    def test_uppercase_extension(self, validator):
        result = validator.validate("POLICY.PDF", MINIMAL_PDF)
        assert result.format_type == "pdf"

    def test_fake_pdf_extension(self, validator):
        """Text file with .pdf extension fails"""
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("fake.pdf", b"This is just text, not a PDF")

        error = str(exc_info.value.detail)
        assert "Format mismatch" in error
        assert "text/plain" in error
        assert "application/pdf" in error

    def test_corrupted_pdf(self, validator):
        """PDF signature but truncated content"""
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("broken.pdf", b"%PDF-1.4\ncorrupted content")

        assert "Corrupted PDF" in str(exc_info.value.detail)

    def test_validation_error_is_bad_request(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("fake.pdf", b"plain text")
        assert exc_info.value.status_code == 400


class TestLimits:

    def test_empty_file(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("empty.txt", b"")
        assert "is empty" in str(exc_info.value.detail)

    def test_file_too_large(self, validator):
        huge_file = b"x" * (FileValidator.MAX_FILE_SIZE + 1)

        with pytest.raises(ValidationError) as exc_info:
            validator.validate("huge.txt", huge_file)

        error = str(exc_info.value.detail)
        assert "too large" in error
        assert "50MB" in error


class TestLenientValidation:
    """Text uploads - accepted if UTF-8"""

    def test_valid_korean_text(self, validator, sample_policy_text):
        result = validator.validate("약관.txt", sample_policy_text.encode("utf-8"))
        assert result.format_type == "text"
        assert result.mime_type == "text/plain"

    def test_valid_markdown(self, validator):
        result = validator.validate("notes.md", b"# Heading\n\nSome text  \n\n- item 1\n* item 2")
        assert result.format_type == "text"

    def test_non_utf8_text_fails(self, validator):
        # EUC-KR bytes are not valid UTF-8
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("legacy.txt", "보험금".encode("euc-kr"))

        assert "not valid UTF-8" in str(exc_info.value.detail)


class TestExtensionValidation:
    """Extension whitelist and error messages"""

    def test_missing_extension(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("README", b"content")

        assert "(none)" in str(exc_info.value.detail)

    @pytest.mark.parametrize("filename", ["file.exe", "data.json", "page.html"])
    def test_unsupported_extension(self, validator, filename):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(filename, b"content")

        error = str(exc_info.value.detail)
        assert "Unsupported" in error
        assert ".md, .pdf, .txt" in error
