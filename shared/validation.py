"""Input validation and sanitization helpers.

Every validator is total: it never raises, it returns a ValidationResult.
"""
import re
from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import urlparse


MAX_TITLE_LENGTH = 200
MAX_EXCERPT_LENGTH = 500
MAX_CONTENT_LENGTH = 50000
MAX_TAGS = 10
MAX_TAG_LENGTH = 50
MAX_CATEGORY_NAME_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 200

NAVIGATION_TYPES = ("internal", "external", "category")

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_ILLEGAL_PATH_CHARS = ("<", ">", '"', "'")
_HTML_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single field check."""
    valid: bool
    error: Optional[str] = None


VALID = ValidationResult(True)


def _invalid(error: str) -> ValidationResult:
    return ValidationResult(False, error)


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_absolute_url(url: Any) -> bool:
    """Check that a URL is absolute and uses http or https."""
    if not isinstance(url, str):
        return False
    try:
        result = urlparse(url)
        return result.scheme in ("http", "https") and bool(result.netloc)
    except ValueError:
        return False


def validate_title(title: Any) -> ValidationResult:
    if _is_blank(title):
        return _invalid("Title cannot be empty")
    if len(title) > MAX_TITLE_LENGTH:
        return _invalid(f"Title cannot exceed {MAX_TITLE_LENGTH} characters")
    return VALID


def validate_excerpt(excerpt: Any) -> ValidationResult:
    if excerpt is None:
        return VALID
    if not isinstance(excerpt, str):
        return _invalid("Excerpt must be text")
    if len(excerpt) > MAX_EXCERPT_LENGTH:
        return _invalid(f"Excerpt cannot exceed {MAX_EXCERPT_LENGTH} characters")
    return VALID


def validate_content(content: Any) -> ValidationResult:
    if _is_blank(content):
        return _invalid("Content cannot be empty")
    if len(content) > MAX_CONTENT_LENGTH:
        return _invalid("Content is too long, split it into several articles")
    return VALID


def validate_tags(tags: Any) -> ValidationResult:
    """Validate an already-parsed tag list."""
    if tags is None:
        return VALID
    if not isinstance(tags, (list, tuple)):
        return _invalid("Tags must be a list")
    if len(tags) > MAX_TAGS:
        return _invalid(f"No more than {MAX_TAGS} tags are allowed")
    for tag in tags:
        if not isinstance(tag, str):
            return _invalid("Tags must be text")
        if len(tag) > MAX_TAG_LENGTH:
            return _invalid(f"A tag cannot exceed {MAX_TAG_LENGTH} characters")
    return VALID


def validate_category_name(name: Any) -> ValidationResult:
    if _is_blank(name):
        return _invalid("Category name cannot be empty")
    if len(name) > MAX_CATEGORY_NAME_LENGTH:
        return _invalid(f"Category name cannot exceed {MAX_CATEGORY_NAME_LENGTH} characters")
    return VALID


def validate_description(description: Any) -> ValidationResult:
    if description is None:
        return VALID
    if not isinstance(description, str):
        return _invalid("Description must be text")
    if len(description) > MAX_DESCRIPTION_LENGTH:
        return _invalid(f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters")
    return VALID


def validate_color(color: Any) -> ValidationResult:
    if not isinstance(color, str) or not _COLOR_PATTERN.match(color):
        return _invalid("Color must be a hex value such as #3b82f6")
    return VALID


def validate_image_url(url: Any) -> ValidationResult:
    if not url:
        return VALID
    if not is_valid_absolute_url(url):
        return _invalid("Cover image must be a valid http or https URL")
    return VALID


def validate_navigation_path(path: Any, nav_type: Any) -> ValidationResult:
    if _is_blank(path):
        return _invalid("Path cannot be empty")
    if nav_type not in NAVIGATION_TYPES:
        return _invalid(f"Unknown navigation type: {nav_type}")

    if nav_type == "external":
        if not is_valid_absolute_url(path):
            return _invalid("External links must be a valid http or https URL")
        return VALID

    if not path.startswith("/"):
        return _invalid("Internal paths must start with /")
    if any(char in path for char in _ILLEGAL_PATH_CHARS):
        return _invalid("Path contains illegal characters")
    return VALID


def validate_email(address: Any) -> ValidationResult:
    if not isinstance(address, str) or not _EMAIL_PATTERN.match(address):
        return _invalid("Enter a valid email address")
    return VALID


def sanitize_text(text: Any) -> str:
    """Escape HTML-significant characters in plain text.

    Markdown bodies are rendered through their own pipeline and must not be
    passed through here.
    """
    if not isinstance(text, str):
        return ""
    return "".join(_HTML_ESCAPES.get(char, char) for char in text)


def sanitize_list(values: List[str]) -> List[str]:
    return [sanitize_text(value) for value in values]
