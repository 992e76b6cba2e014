"""
Utility modules for the listings API.
"""

from .exceptions import (
    APIException,
    NotFoundError,
    BadRequestError,
    InternalServerError,
    MissingFieldsError,
    PropertyNotFoundError,
    AgentNotFoundError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
    TooManyFilesError
)

from .image_paths import (
    normalize_reference,
    normalize_reference_list,
    load_reference_list,
    dump_reference_list,
    format_image_url,
    format_image_urls
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Exceptions
    "APIException",
    "NotFoundError",
    "BadRequestError",
    "InternalServerError",
    "MissingFieldsError",
    "PropertyNotFoundError",
    "AgentNotFoundError",
    "FileUploadError",
    "UnsupportedFileTypeError",
    "FileSizeExceededError",
    "TooManyFilesError",

    # Image reference helpers
    "normalize_reference",
    "normalize_reference_list",
    "load_reference_list",
    "dump_reference_list",
    "format_image_url",
    "format_image_urls",
]
