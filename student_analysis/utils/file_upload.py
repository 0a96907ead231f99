"""
File Upload Utility - stage uploaded documents on disk and read text back.

Staged files are scoped resources: `staged_upload` deletes them on every
exit path, including exceptions raised inside the `async with` block.

Supported text formats (for the LLM-only fallback):
- PDF (.pdf) using PyPDF2
- Word (.docx) using python-docx
- Plain Text (.txt)
"""

import io
import logging
import os
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Iterable, Optional

from docx import Document
from fastapi import UploadFile
from PyPDF2 import PdfReader

from student_analysis.core.config import Settings
from student_analysis.core.errors import ValidationError

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = {'.pdf', '.doc', '.docx', '.txt'}
IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif'}


@dataclass
class StagedUpload:
    path: str
    filename: str
    content_type: str
    size: int


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def validate_upload(file: Optional[UploadFile], field: str, allowed: Iterable[str]) -> UploadFile:
    """Reject missing files and disallowed extensions before anything is written."""
    if file is None or not file.filename:
        raise ValidationError(f"No {field} file uploaded")

    ext = get_file_extension(file.filename)
    if ext not in allowed:
        raise ValidationError(
            f"Invalid file type '{ext}'. Allowed: {', '.join(sorted(allowed))}"
        )
    return file


@asynccontextmanager
async def staged_upload(
    file: UploadFile,
    settings: Settings,
    field: str,
    allowed: Iterable[str] = DOCUMENT_EXTENSIONS
) -> AsyncIterator[StagedUpload]:
    """
    Write an upload to the upload directory and yield its location.

    Usage:
        async with staged_upload(file, settings, "resume") as staged:
            ...
    """
    validate_upload(file, field, allowed)

    content = await file.read()
    if len(content) > settings.max_upload_size_bytes:
        raise ValidationError(
            f"File too large. Maximum size is {settings.max_upload_size_mb}MB."
        )

    os.makedirs(settings.upload_dir, exist_ok=True)
    stored_name = f"{uuid.uuid4().hex}-{os.path.basename(file.filename)}"
    path = os.path.join(settings.upload_dir, stored_name)

    try:
        with open(path, "wb") as fh:
            fh.write(content)
        yield StagedUpload(
            path=path,
            filename=file.filename,
            content_type=file.content_type or "application/octet-stream",
            size=len(content)
        )
    finally:
        try:
            os.remove(path)
            logger.debug("Temporary file cleaned up: %s", path)
        except FileNotFoundError:
            pass


def extract_text_from_path(path: str, filename: str) -> str:
    """
    Extract text from a staged file.
    Returns "" for formats we cannot read (e.g. legacy .doc) or unreadable files.
    """
    ext = get_file_extension(filename)
    with open(path, "rb") as fh:
        content = fh.read()

    try:
        if ext == '.pdf':
            return extract_from_pdf(content)
        if ext == '.docx':
            return extract_from_docx(content)
        if ext == '.txt':
            return extract_from_txt(content)
    except Exception as e:
        logger.warning("Could not read text from %s: %s", filename, e)
    return ""


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    reader = PdfReader(io.BytesIO(content))
    text_parts = []
    for page in reader.pages:
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
    return '\n'.join(text_parts)


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    doc = Document(io.BytesIO(content))
    text_parts = []

    # Extract paragraphs
    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    # Extract tables
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)


def extract_from_txt(content: bytes) -> str:
    """Extract text from TXT bytes."""
    for encoding in ['utf-8', 'latin-1', 'cp1252']:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return ""
