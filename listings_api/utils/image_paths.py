"""
Helpers for image reference lists.

A reference list is an ordered list of relative paths such as
``/uploads/properties/property-1700000000000-42.jpg``. It is stored as JSON
array text and turned into absolute URLs only when a record is returned.
"""

from typing import Any, List, Optional, Union
from urllib.parse import urlsplit
import json
import logging

logger = logging.getLogger(__name__)

# Image references as they may arrive from a client: JSON array text,
# repeated form fields, or nothing at all.
RawPathList = Union[None, str, List[Any]]


def has_scheme(path: str) -> bool:
    """Return True if the path already carries a URL scheme."""
    return "://" in path


def normalize_reference(path: Any) -> Optional[str]:
    """
    Reduce a single reference to its relative path.

    Full URLs lose their scheme and host; anything that is not a non-blank
    string yields None.
    """
    if not isinstance(path, str):
        return None

    path = path.strip()
    if not path:
        return None

    if has_scheme(path):
        path = urlsplit(path).path

    return path or None


def normalize_reference_list(raw: RawPathList) -> List[str]:
    """
    Normalise client supplied references into an ordered list of relative paths.

    Accepts JSON array text, a list of strings (where a single element may
    itself be JSON array text), or a single plain path. Malformed JSON yields
    an empty list.
    """
    if raw is None:
        return []

    if isinstance(raw, list):
        if len(raw) == 1 and isinstance(raw[0], str) and raw[0].strip().startswith("["):
            return normalize_reference_list(raw[0])
        items = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        if text.startswith("["):
            try:
                items = json.loads(text)
            except ValueError as e:
                logger.warning(f"Could not parse image reference list: {e}")
                return []
            if not isinstance(items, list):
                return []
        else:
            items = [text]
    else:
        return []

    paths = []
    for item in items:
        path = normalize_reference(item)
        if path is not None:
            paths.append(path)
    return paths


def load_reference_list(stored: Optional[str]) -> List[str]:
    """
    Deserialize the stored image column.
    Invalid JSON or non-list content is logged and read as an empty list.
    """
    if not stored:
        return []

    try:
        items = json.loads(stored)
    except ValueError as e:
        logger.warning(f"Stored image list is not valid JSON: {e}")
        return []

    if not isinstance(items, list):
        logger.warning("Stored image list is not a JSON array")
        return []

    return [item for item in items if isinstance(item, str) and item]


def dump_reference_list(paths: List[str]) -> str:
    """Serialize a reference list for storage."""
    return json.dumps(list(paths))


def format_image_url(path: Any, base_url: str) -> Optional[str]:
    """
    Turn a stored relative path into an absolute URL for ``base_url``.
    Absolute URLs pass through; non-string or empty entries yield None.
    """
    if not isinstance(path, str) or not path:
        return None

    if has_scheme(path):
        return path

    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_url.rstrip('/')}{path}"


def format_image_urls(paths: Any, base_url: str) -> List[str]:
    """Format a reference list (or stored JSON text) as absolute URLs."""
    if isinstance(paths, str):
        paths = load_reference_list(paths)
    elif not isinstance(paths, list):
        return []

    urls = []
    for path in paths:
        url = format_image_url(path, base_url)
        if url:
            urls.append(url)
    return urls
