"""
Text extraction for uploaded policy documents

Handles:
1. Text-layer PDFs via PyMuPDF plain text, one output line per PDF text line
2. Scanned PDFs via OCR (PyMuPDF + Tesseract) when the text layer is too thin
3. Plain text / Markdown uploads

Output keeps the document's line breaks: section segmentation matches
headings line by line, so no markup is added and lines are never merged.

Extraction is synchronous and CPU/IO heavy; async callers run it in a
worker thread.
"""

import logging

import pymupdf

from .exceptions import TextExtractionError

logger = logging.getLogger(__name__)

PDF_TYPES = ('pdf', 'application/pdf')
TEXT_TYPES = {
    'txt', 'text/plain',
    'md', 'markdown', 'text/markdown',
}

OCR_DPI = 300


class DocumentProcessor:
    """Extract raw text from policy documents"""

    def __init__(self, ocr_min_chars: int = 100, ocr_language: str = "kor"):
        """
        Args:
            ocr_min_chars: Text-layer output at or below this many characters
                (after trimming) is treated as a scanned document and OCR'd
            ocr_language: Tesseract language code
        """
        self.ocr_min_chars = ocr_min_chars
        self.ocr_language = ocr_language

    def extract_text_from_pdf(self, pdf_bytes: bytes) -> str:
        """
        Extract text from PDF bytes, falling back to OCR for scanned pages

        Args:
            pdf_bytes: PDF file content

        Returns:
            Plain text, pages joined with newlines
        """
        doc = pymupdf.open(stream=pdf_bytes, filetype="pdf")
        try:
            logger.debug(f"PDF has {len(doc)} pages, extracting text...")
            text = '\n'.join(page.get_text() for page in doc)

            if len(text.strip()) > self.ocr_min_chars:
                logger.info(f"Text layer extraction succeeded ({len(text)} chars)")
                return text

            logger.info(
                f"Text layer too thin ({len(text.strip())} chars), "
                f"running OCR (language={self.ocr_language})"
            )
            return self.ocr_pdf(doc)
        finally:
            doc.close()

    def ocr_pdf(self, doc: pymupdf.Document) -> str:
        """
        OCR every page of an open PDF document

        Requires a Tesseract installation with the configured language pack.
        """
        pages = []
        for page in doc:
            textpage = page.get_textpage_ocr(language=self.ocr_language, dpi=OCR_DPI, full=True)
            page_text = page.get_text(textpage=textpage)
            logger.debug(f"OCR page {page.number + 1}/{len(doc)}: {len(page_text)} chars")
            pages.append(page_text)
        return '\n'.join(pages) + '\n'

    def extract_text_from_txt(self, txt_bytes: bytes) -> str:
        """Decode text upload (UTF-8, latin-1 fallback)"""
        try:
            return txt_bytes.decode('utf-8')
        except UnicodeDecodeError:
            # latin-1 never fails
            logger.warning("UTF-8 decode failed, using latin-1")
            return txt_bytes.decode('latin-1', errors='replace')

    def extract_text(self, file_content: bytes, file_type: str) -> str:
        """
        Extract text from file based on type

        Args:
            file_content: File content as bytes
            file_type: File extension (.pdf, .txt) or MIME type

        Returns:
            Extracted text

        Raises:
            ValueError: Unsupported file type
            TextExtractionError: Extraction failed
        """
        file_ext = file_type.lower()
        if file_ext.startswith('.'):
            file_ext = file_ext[1:]

        if file_ext in PDF_TYPES:
            extractor = self.extract_text_from_pdf
        elif file_ext in TEXT_TYPES:
            extractor = self.extract_text_from_txt
        else:
            raise ValueError(f"Unsupported file type: {file_type}. Supported: pdf, txt, md")

        try:
            return extractor(file_content)
        except Exception as e:
            logger.error(f"Text extraction failed ({file_ext}): {e}")
            raise TextExtractionError(f"Text extraction failed: {e}") from e
