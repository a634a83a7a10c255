"""Upload validation: media type allow-list and size ceiling."""

import logging

from .media_types import IMAGE_FILE_TYPES, SUPPORTED_FILE_TYPES
from .policy import ValidationPolicy
from .utils.errors import FileTooLarge, ImageFileRejected, UnsupportedFileType

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


def validate_file(file_type: str, file_size: int, policy: ValidationPolicy) -> None:
    """
    Validate a declared media type and byte size against a policy.

    Args:
        file_type: Declared media type of the upload
        file_size: Declared size in bytes
        policy: Limits for the owner's deployment variant

    Raises:
        ImageFileRejected: If images are refused and file_type is an image
        UnsupportedFileType: If file_type is not on the allow-list
        FileTooLarge: If file_size exceeds policy.max_file_size
    """
    if policy.reject_images and file_type in IMAGE_FILE_TYPES:
        raise ImageFileRejected(
            f"Image files are not supported for text processing. File type: {file_type}. "
            "Please upload text-based documents only."
        )

    if file_type not in SUPPORTED_FILE_TYPES:
        raise UnsupportedFileType(
            f"Unsupported file type: {file_type}. "
            f"Supported types: {', '.join(sorted(SUPPORTED_FILE_TYPES))}"
        )

    if file_size > policy.max_file_size:
        raise FileTooLarge(
            f"File size ({file_size / _MB:.1f}MB) exceeds the maximum allowed size "
            f"of {policy.max_file_size / _MB:.0f}MB"
        )

    logger.debug(f"[validation] Accepted {file_type} ({file_size} bytes)")


__all__ = ["validate_file"]
