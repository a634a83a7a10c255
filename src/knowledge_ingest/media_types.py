"""Media type groupings recognised by the ingestion pipeline."""

TEXT_TYPES = frozenset({
    "text/plain",
    "text/markdown",
    "text/csv",
    "application/json",
    "application/xml",
    "text/xml",
})

RTF_TYPES = frozenset({
    "text/rtf",
    "application/rtf",
    "text/richtext",
})

PDF_TYPES = frozenset({"application/pdf"})

WORD_TYPES = frozenset({
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
})

EXCEL_TYPES = frozenset({
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})

POWERPOINT_TYPES = frozenset({
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
})

OPENDOCUMENT_TYPES = frozenset({
    "application/vnd.oasis.opendocument.text",
    "application/vnd.oasis.opendocument.spreadsheet",
    "application/vnd.oasis.opendocument.presentation",
})

SUPPORTED_FILE_TYPES = (
    TEXT_TYPES
    | RTF_TYPES
    | PDF_TYPES
    | WORD_TYPES
    | EXCEL_TYPES
    | POWERPOINT_TYPES
    | OPENDOCUMENT_TYPES
)

IMAGE_FILE_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/bmp",
    "image/svg+xml",
    "image/webp",
    "image/tiff",
    "image/ico",
    "image/x-icon",
})

__all__ = [
    "TEXT_TYPES",
    "RTF_TYPES",
    "PDF_TYPES",
    "WORD_TYPES",
    "EXCEL_TYPES",
    "POWERPOINT_TYPES",
    "OPENDOCUMENT_TYPES",
    "SUPPORTED_FILE_TYPES",
    "IMAGE_FILE_TYPES",
]
