"""
Document Extraction Service

Handles resume upload validation, temporary storage and text extraction
from PDF and DOCX files.
"""

import os
import re
import tempfile
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

from PyPDF2 import PdfReader
from docx import Document

from resume_review.config import Config
from resume_review.utils.logger import get_logger
from resume_review.utils.exceptions import (
    CorruptFile,
    EmptyExtraction,
    FileTooLarge,
    UnsupportedFormat,
)

logger = get_logger(__name__)

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass
class UploadedDocument:
    """A resume as received in the multipart body."""
    content: bytes
    content_type: str
    filename: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return Path(self.filename or "").suffix.lower()


@dataclass
class ExtractedText:
    content: str


def remove_temp_file(path: Optional[str]) -> None:
    """Delete a temporary file. Missing paths are ignored; failures are logged only."""
    if not path:
        return
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"[DocumentExtractor] ⚠️ Failed to remove temporary file {path}: {e}")


class DocumentExtractor:
    """Service for turning uploaded resumes into plain text"""

    def __init__(self, config: Config):
        self.config = config
        self.max_upload_bytes = config.upload.max_upload_bytes

    def check_size(self, size_bytes: int) -> None:
        if size_bytes > self.max_upload_bytes:
            raise FileTooLarge(
                f"File size exceeds maximum of {self.max_upload_bytes / 1024 / 1024:g}MB"
            )

    def detect_format(self, content_type: Optional[str], extension: Optional[str]) -> str:
        """
        Pick the extraction path for an upload.

        Browsers often send unreliable mimetypes, so the file extension is
        consulted as well.

        Returns:
            "PDF" or "DOCX"

        Raises:
            UnsupportedFormat: Neither the mimetype nor the extension is supported
        """
        content_type = (content_type or "").lower()
        extension = (extension or "").lower()

        if content_type == PDF_MIME_TYPE or extension == ".pdf":
            return "PDF"
        if content_type == DOCX_MIME_TYPE or extension == ".docx":
            return "DOCX"
        raise UnsupportedFormat(content_type or extension)

    def extract(self, content: bytes, content_type: Optional[str], extension: Optional[str]) -> ExtractedText:
        """
        Extract text from a resume.

        Args:
            content: File content as bytes
            content_type: MIME type of file
            extension: File extension including the dot (e.g. ".pdf")

        Returns:
            ExtractedText with trimmed, non-empty content

        Raises:
            UnsupportedFormat, CorruptFile, EmptyExtraction
        """
        file_format = self.detect_format(content_type, extension)

        if not content or not content.strip():
            raise EmptyExtraction()

        if file_format == "PDF":
            raw_text = self._extract_pdf_text(content)
        else:
            raw_text = self._extract_docx_text(content)

        text = self._clean_text(raw_text)
        if not text:
            raise EmptyExtraction()

        if len(text) < 50:
            logger.warning(f"[DocumentExtractor] ⚠️ Extracted text is very short ({len(text)} chars)")

        return ExtractedText(content=text)

    def extract_file(self, path: str, content_type: Optional[str], extension: Optional[str]) -> ExtractedText:
        """Extract text from a file on disk, deleting it afterwards on every path."""
        try:
            with open(path, "rb") as fh:
                content = fh.read()
            return self.extract(content, content_type, extension)
        finally:
            remove_temp_file(path)

    def extract_upload(self, upload: UploadedDocument) -> ExtractedText:
        """
        Store an upload in a temporary file and extract its text.

        The size cap is enforced before anything is written or parsed.
        """
        self.check_size(upload.size_bytes)

        fd, path = tempfile.mkstemp(prefix="resume-", suffix=upload.extension)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(upload.content)
        except OSError:
            remove_temp_file(path)
            raise

        logger.info(
            f"[DocumentExtractor] Extracting {upload.filename!r} "
            f"({upload.content_type or 'no mimetype'}, {upload.size_bytes} bytes)"
        )
        return self.extract_file(path, upload.content_type, upload.extension)

    def _extract_pdf_text(self, file_content: bytes) -> str:
        """Extract text from PDF file"""
        try:
            reader = PdfReader(BytesIO(file_content))

            text_parts = []
            for page in reader.pages:
                text = page.extract_text()
                if text:
                    text_parts.append(text)
            num_pages = len(reader.pages)
        except Exception as e:
            logger.error(f"[DocumentExtractor] PDF extraction error: {e}", exc_info=True)
            raise CorruptFile("PDF") from e

        full_text = "\n".join(text_parts)
        logger.info(f"[DocumentExtractor] ✅ PDF extraction complete: {len(full_text)} characters from {num_pages} page(s)")
        return full_text

    def _extract_docx_text(self, file_content: bytes) -> str:
        """Extract raw text from DOCX file (paragraphs, then table cells)"""
        try:
            doc = Document(BytesIO(file_content))

            text_parts = [paragraph.text for paragraph in doc.paragraphs]
            for table in doc.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        text_parts.append(" | ".join(cells))
        except Exception as e:
            logger.error(f"[DocumentExtractor] DOCX extraction error: {e}", exc_info=True)
            raise CorruptFile("DOCX") from e

        full_text = "\n".join(text_parts)
        logger.info(f"[DocumentExtractor] ✅ DOCX extraction complete: {len(full_text)} characters")
        return full_text

    def _clean_text(self, text: str) -> str:
        """Strip trailing spaces per line and collapse blank-line runs"""
        text = "\n".join(line.rstrip() for line in (text or "").splitlines())
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()
