"""
Text extraction for uploaded resumes (PDF and DOCX).
"""
from __future__ import annotations

import logging
import re
from pathlib import Path

import pdfplumber
from docx import Document
from pypdf import PdfReader

from jobhunt.models.resume import FileKind

logger = logging.getLogger(__name__)

_CRLF_RE = re.compile(r"\r\n?")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_INLINE_SPACE_RE = re.compile(r"[ \t]{2,}")

DOCX_HINT = "Please try uploading a DOCX file instead."
PDF_CORRUPT_HINT = (
    "PDF file appears to be corrupted or uses an unsupported format. Please try:\n"
    "1. Re-exporting your PDF from the original application\n"
    "2. Using a DOCX file instead (recommended)\n"
    "3. Using a PDF repair tool"
)


class ExtractionError(Exception):
    """The file yielded no usable text. The message tells the user what to try next."""


class ResumeTextTooShortError(ExtractionError):
    """Extracted text is below the minimum length for a resume."""


def clean_extracted_text(text: str) -> str:
    """Normalize line endings, collapse blank-line runs and inline whitespace."""
    text = _CRLF_RE.sub("\n", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    text = _INLINE_SPACE_RE.sub(" ", text)
    return text.strip()


def _pdf_text_pdfplumber(path: Path) -> str:
    parts = []
    with pdfplumber.open(path) as pdf:
        for page in pdf.pages:
            page_text = page.extract_text()
            if page_text:
                parts.append(page_text)
    text = "\n".join(parts)
    if not text.strip():
        raise ValueError("No text content found in PDF")
    return text


def _pdf_text_pypdf(path: Path) -> str:
    reader = PdfReader(str(path), strict=False)
    text = "\n".join(page.extract_text() or "" for page in reader.pages)
    if not text.strip():
        raise ValueError("No text content found in PDF")
    return text


def extract_pdf_text(path: Path) -> str:
    try:
        return _pdf_text_pdfplumber(path)
    except Exception as primary:
        logger.info("Primary PDF parser failed (%s), trying fallback parser", primary)
        try:
            text = _pdf_text_pypdf(path)
        except Exception as fallback:
            logger.error("Both PDF parsers failed: primary=%s fallback=%s", primary, fallback)
            message = str(primary).lower()
            if "xref" in message or "illegal character" in message or "eof" in message:
                raise ExtractionError(PDF_CORRUPT_HINT) from fallback
            raise ExtractionError(f"Failed to parse PDF file. {DOCX_HINT} Error: {primary}") from fallback
        logger.info("Fallback PDF parser succeeded")
        return text


def extract_docx_text(path: Path) -> str:
    try:
        document = Document(str(path))
    except Exception as exc:
        logger.error("Error extracting text from DOCX %s: %s", path.name, exc)
        raise ExtractionError("Failed to parse DOCX file. Try re-saving it or upload a PDF instead.") from exc
    lines = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            lines.append(" ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def extract_text(path: str | Path, file_kind: FileKind) -> str:
    path = Path(path)
    if file_kind is FileKind.pdf:
        return extract_pdf_text(path)
    if file_kind is FileKind.docx:
        return extract_docx_text(path)
    raise ExtractionError(f"Unsupported file type: {file_kind}")
