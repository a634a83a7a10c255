"""Text extraction and image-noise stripping.

Dispatches on the declared media type to a format parser (PyPDF2 for PDF,
python-docx for Word, openpyxl for Excel, XML scraping for PowerPoint and
OpenDocument) and returns a single normalized text blob.
"""

import csv
import io
import logging
import re
import zipfile
from typing import Callable, Dict, Optional, Tuple

import openpyxl
from docx import Document
from PyPDF2 import PdfReader

from .media_types import (
    EXCEL_TYPES,
    OPENDOCUMENT_TYPES,
    PDF_TYPES,
    POWERPOINT_TYPES,
    RTF_TYPES,
    TEXT_TYPES,
    WORD_TYPES,
)
from .policy import ValidationPolicy
from .utils.errors import ExtractionError

logger = logging.getLogger(__name__)


# ===== IMAGE REFERENCE STRIPPING =====
_IMAGE_PLACEHOLDERS = (
    "Image",
    "Picture",
    r"Figure \d+",
    "Chart",
    "Graph",
    "Diagram",
    "Screenshot",
    "Photo",
    "Illustration",
    "Logo",
    "Banner",
    "Header Image",
    "Footer Image",
    "Background Image",
)

_IMAGE_PATTERNS = (
    re.compile(r"\[(?:%s)\]" % "|".join(_IMAGE_PLACEHOLDERS), re.IGNORECASE),
    re.compile(r"data:image/[^;]+;base64,[A-Za-z0-9+/=]+"),
    re.compile(r"\.(?:jpg|jpeg|png|gif|bmp|svg|webp|tiff|ico)\b(?:\?\S*)?", re.IGNORECASE),
)

_EXCESS_BLANK_LINES = re.compile(r"\n[ \t]*(?:\n[ \t]*){2,}")
_EXCESS_SPACES = re.compile(r"[ \t]{2,}")


def _strip_once(text: str) -> str:
    for pattern in _IMAGE_PATTERNS:
        text = pattern.sub("", text)
    text = _EXCESS_BLANK_LINES.sub("\n\n", text)
    text = _EXCESS_SPACES.sub(" ", text)
    return text.strip()


def remove_image_references(text: str) -> str:
    """
    Remove image placeholders and references from extracted text.

    Removes:
    - Bracketed placeholders ([Image], [Figure 3], [Logo], ...)
    - Base64 image data URIs
    - Image file extension references (.png, .jpg?size=large, ...)

    Then collapses three or more line breaks into one blank line and runs
    of spaces or tabs into one space, and trims. Paragraph breaks survive.

    Args:
        text: Extracted text

    Returns:
        Cleaned text; applying the function again returns it unchanged
    """
    if not text:
        return text

    original_length = len(text)
    cleaned = _strip_once(text)
    # Removal can splice together a new match, so repeat until stable
    while True:
        again = _strip_once(cleaned)
        if again == cleaned:
            break
        cleaned = again

    removed = original_length - len(cleaned)
    if removed > 0:
        logger.debug(
            f"[extraction] Image filtering removed {removed} chars "
            f"({original_length} -> {len(cleaned)} chars)"
        )
    return cleaned


# ===== FORMAT PARSERS =====
def decode_text(data: bytes) -> str:
    """
    Decode plain text bytes.

    Supports UTF-8 with fallback to latin-1 for different encodings.
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("[extraction] Used latin-1 encoding for text payload")
        return data.decode("latin-1")


def parse_pdf(data: bytes) -> str:
    """Extract page text from a PDF using PyPDF2."""
    reader = PdfReader(io.BytesIO(data))
    text_parts = []
    for page_num, page in enumerate(reader.pages):
        page_text = page.extract_text()
        if page_text:
            text_parts.append(page_text)
        else:
            logger.warning(f"[extraction] No text found on PDF page {page_num + 1}")
    return "\n".join(text_parts)


def parse_word(data: bytes) -> str:
    """Extract paragraph text from a Word document using python-docx."""
    doc = Document(io.BytesIO(data))
    return "\n".join(para.text for para in doc.paragraphs if para.text.strip())


def parse_excel(data: bytes) -> str:
    """Dump every sheet as CSV, each prefixed with ``Sheet: <name>``."""
    workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    try:
        parts = []
        for sheet in workbook.worksheets:
            buffer = io.StringIO()
            writer = csv.writer(buffer, lineterminator="\n")
            for row in sheet.iter_rows(values_only=True):
                writer.writerow(["" if value is None else value for value in row])
            parts.append(f"Sheet: {sheet.title}\n{buffer.getvalue()}\n\n")
        return "".join(parts)
    finally:
        workbook.close()


_POWERPOINT_TEXT = re.compile(r"<a:t[^>]*>([^<]*)</a:t>")
_OPENDOCUMENT_TEXT = re.compile(r"<text:[^>]*>([^<]*)</text:[^>]*>")
_XML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def _xml_payloads(data: bytes, member_filter: Callable[[str], bool]) -> str:
    # OOXML and ODF files are zip archives; flat XML variants are not
    if zipfile.is_zipfile(io.BytesIO(data)):
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            names = sorted(
                (name for name in archive.namelist() if member_filter(name)),
                key=_natural_key,
            )
            return "\n".join(archive.read(name).decode("utf-8", errors="replace") for name in names)
    return data.decode("utf-8", errors="replace")


def _natural_key(name: str):
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", name)]


def _scrape_xml_text(xml: str, marker: re.Pattern) -> str:
    matches = marker.findall(xml)
    if matches:
        return "\n".join(matches)
    # Fallback: strip every tag and keep whatever text is left
    return _WHITESPACE.sub(" ", _XML_TAG.sub("", xml)).strip()


def parse_powerpoint(data: bytes) -> str:
    """Scrape ``<a:t>`` text runs from slide XML."""
    xml = _xml_payloads(
        data,
        lambda name: name.startswith("ppt/slides/slide") and name.endswith(".xml"),
    )
    return _scrape_xml_text(xml, _POWERPOINT_TEXT)


def parse_opendocument(data: bytes) -> str:
    """Scrape ``<text:*>`` elements from OpenDocument content XML."""
    xml = _xml_payloads(data, lambda name: name == "content.xml")
    return _scrape_xml_text(xml, _OPENDOCUMENT_TEXT)


Parser = Callable[[bytes], str]


def _parser_table() -> Dict[str, Tuple[str, Parser]]:
    groups = (
        (TEXT_TYPES, "text file", decode_text),
        (RTF_TYPES, "RTF file", decode_text),
        (PDF_TYPES, "PDF", parse_pdf),
        (WORD_TYPES, "Word document", parse_word),
        (EXCEL_TYPES, "Excel file", parse_excel),
        (POWERPOINT_TYPES, "PowerPoint file", parse_powerpoint),
        (OPENDOCUMENT_TYPES, "OpenDocument file", parse_opendocument),
    )
    return {
        file_type: (label, parser)
        for file_types, label, parser in groups
        for file_type in file_types
    }


_PARSERS = _parser_table()


def _disabled_message(file_type: str) -> str:
    if file_type in POWERPOINT_TYPES:
        return "PowerPoint processing is temporarily disabled. Please convert to text format."
    if file_type in RTF_TYPES:
        return "RTF processing is temporarily disabled. Please convert to text format."
    return f"Processing of {file_type} files is disabled. Please convert to text format."


# ===== DISPATCH =====
def extract_text(data: bytes, file_type: str, policy: Optional[ValidationPolicy] = None) -> str:
    """
    Extract normalized text from a document of any supported type.

    Args:
        data: Raw file bytes
        file_type: Declared media type
        policy: Deployment policy; its disabled_types are refused

    Returns:
        Extracted text with image references removed

    Raises:
        ExtractionError: If the type is unsupported or disabled, or the
            parser fails
    """
    if policy is not None and file_type in policy.disabled_types:
        raise ExtractionError(_disabled_message(file_type))

    entry = _PARSERS.get(file_type)
    if entry is None:
        raise ExtractionError(f"Unsupported file type: {file_type}. Please convert to a supported format.")

    label, parser = entry
    try:
        raw_text = parser(data)
    except Exception as e:
        logger.error(f"[extraction] Failed to process {label}: {e}")
        raise ExtractionError(f"Failed to process {label}: {e}") from e

    text = remove_image_references(raw_text)
    logger.info(f"[extraction] Extracted {len(text)} chars from {label}")
    return text


__all__ = [
    "extract_text",
    "remove_image_references",
    "decode_text",
    "parse_pdf",
    "parse_word",
    "parse_excel",
    "parse_powerpoint",
    "parse_opendocument",
]
