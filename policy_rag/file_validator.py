"""
Upload validation for policy documents

Policies are ingested once and queried many times, so a broken upload is
rejected up front with an actionable message instead of producing empty or
garbage sections.

Two tiers:
1. STRICT (PDF): magic bytes must match, document must open and have pages
2. LENIENT (text/Markdown): must decode as UTF-8
"""

from pathlib import Path
from typing import Literal

import magic
import pymupdf
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """File validation failed with actionable error message"""

    def __init__(self, message: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=message,
        )


class ValidationResult:
    """Result of file validation"""

    def __init__(self, format_type: Literal["pdf", "text"], mime_type: str, page_count: int = 0):
        self.format_type = format_type
        self.mime_type = mime_type
        self.page_count = page_count


class FileValidator:
    """
    Validates uploaded policy files:
    - Size limit
    - Extension whitelist
    - Magic bytes detection (prevent spoofing)
    - Format-specific check (PDF opens, text decodes)
    """

    STRICT_FORMATS = {".pdf"}
    STRICT_MIME_MAP = {".pdf": "application/pdf"}
    TEXT_FORMATS = {".txt", ".md"}

    MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB

    def __init__(self):
        self.mime_detector = magic.Magic(mime=True)

    @property
    def supported_extensions(self) -> set[str]:
        return self.STRICT_FORMATS | self.TEXT_FORMATS

    def validate(self, filename: str, content: bytes) -> ValidationResult:
        """
        Validate uploaded file

        Args:
            filename: Original filename with extension
            content: File content as bytes

        Returns:
            ValidationResult with format type

        Raises:
            ValidationError: If validation fails
        """
        if not content:
            raise ValidationError(f"File '{filename}' is empty.")

        if len(content) > self.MAX_FILE_SIZE:
            raise ValidationError(
                f"File '{filename}' is too large ({len(content) / 1024 / 1024:.1f}MB).\n"
                f"Maximum allowed: {self.MAX_FILE_SIZE / 1024 / 1024:.0f}MB."
            )

        ext = Path(filename).suffix.lower()
        if ext not in self.supported_extensions:
            raise ValidationError(
                f"Unsupported file extension '{ext or '(none)'}' in '{filename}'.\n"
                f"Supported: {', '.join(sorted(self.supported_extensions))}"
            )

        if ext in self.STRICT_FORMATS:
            return self._validate_pdf(ext, content, filename)
        return self._validate_text(content, filename)

    def _detect_mime_type(self, content: bytes) -> str:
        """Detect MIME type from file content (first 2KB)"""
        return self.mime_detector.from_buffer(content[:2048])

    def _validate_pdf(self, ext: str, content: bytes, filename: str) -> ValidationResult:
        expected_mime = self.STRICT_MIME_MAP[ext]
        detected_mime = self._detect_mime_type(content)

        if detected_mime != expected_mime:
            raise ValidationError(
                f"Format mismatch in '{filename}':\n"
                f"  Extension claims: {ext} ({expected_mime})\n"
                f"  Actual content: {detected_mime}\n"
                f"Rename the file or upload the real PDF."
            )

        try:
            doc = pymupdf.open(stream=content, filetype="pdf")
            page_count = len(doc)
            doc.close()
        except Exception as e:
            raise ValidationError(
                f"Corrupted PDF: '{filename}'\n"
                f"Error: {str(e)[:200]}\n"
                f"Re-save the PDF from its original source and upload again."
            )

        if page_count == 0:
            raise ValidationError(
                f"PDF '{filename}' is empty (0 pages).\n"
                f"Cannot extract text from empty documents."
            )

        return ValidationResult(format_type="pdf", mime_type=detected_mime, page_count=page_count)

    def _validate_text(self, content: bytes, filename: str) -> ValidationResult:
        try:
            content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(
                f"File '{filename}' is not valid UTF-8 text.\n"
                f"Error at byte position {e.start}: {e.reason}\n"
                f"Save the file with UTF-8 encoding and upload again."
            )

        return ValidationResult(format_type="text", mime_type="text/plain")
