"""
Escaping Boundary
=================

Encoding and validation for every sink that reaches rendered markup.

Text and attribute values are encoded unconditionally at render time. URLs, CSS
values, DOM ids and attribute names are validated when a node is configured, so an
unsafe value never becomes part of a tree.
"""

import re
from typing import Optional

ALLOWED_URL_SCHEMES = frozenset({"http", "https", "mailto", "tel"})
RELATIVE_URL_PREFIXES = ("#", "/", "./", "../", "?", "//")

_CSS_LENGTH = re.compile(r"^(auto|[+-]?0|\d+(\.\d+)?(px|%|rem|em|vw|vh))$")
_DOM_ID = re.compile(r"^[A-Za-z0-9_-]+$")
_ATTRIBUTE_NAME = re.compile(r"^[A-Za-z_:][A-Za-z0-9_:.-]*$")
_TAG_NAME = re.compile(r"^[A-Za-z][A-Za-z0-9-]*$")
_STYLE_PROPERTY = re.compile(r"^-?[a-z][a-z-]*$")
_STYLE_VALUE_FORBIDDEN = re.compile(r"[;{}()<>\"'\\]")
_URL_SCHEME = re.compile(r"^([a-z][a-z0-9+.-]*):")
# Characters browsers strip from a URL before reading its scheme.
_URL_IGNORED_CHARS = re.compile(r"[\x00-\x20\x7f]")


class InvalidInputError(ValueError):
    """Raised when a value cannot be placed in markup safely."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.value = value


def encode_text(text: str) -> str:
    """
    Encode a string for an element body.

    Args:
        text: Untrusted text

    Returns:
        Text with ``& < > " '`` replaced by character references
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def encode_attribute(value: str) -> str:
    """Encode a string for a double-quoted attribute value."""
    return (
        value.replace("&", "&amp;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace("`", "&#x60;")
    )


def _url_scheme(url: str) -> Optional[str]:
    normalized = _URL_IGNORED_CHARS.sub("", url).lower()
    if normalized.startswith(RELATIVE_URL_PREFIXES):
        return None
    match = _URL_SCHEME.match(normalized)
    if match:
        return match.group(1)
    if ":" in normalized:
        colon = normalized.index(":")
        # A colon before any path, query or fragment delimiter is a scheme separator.
        if not any(delim in normalized[:colon] for delim in "/?#"):
            return normalized[:colon]
    return None


def validate_url(url: str, field: str = "href") -> str:
    """
    Validate a link target against the scheme allow-list.

    Empty values, relative references and scheme-less paths are accepted, as are
    ``http``, ``https``, ``mailto`` and ``tel`` URLs.

    Args:
        url: Candidate URL
        field: Attribute name, reported on failure

    Returns:
        The URL, unchanged

    Raises:
        InvalidInputError: If the URL uses any other scheme
    """
    if url is None:
        raise InvalidInputError(f"{field} must not be None", field=field)
    scheme = _url_scheme(url)
    if scheme is not None and scheme not in ALLOWED_URL_SCHEMES:
        raise InvalidInputError(
            f"URL scheme '{scheme}' is not allowed for {field}", field=field, value=url
        )
    return url


def validate_image_url(url: str, field: str = "src") -> str:
    """Validate an image source. Inline ``data:image/...`` sources are also accepted."""
    if url is None:
        raise InvalidInputError(f"{field} must not be None", field=field)
    normalized = _URL_IGNORED_CHARS.sub("", url).lower()
    if normalized.startswith("data:"):
        if normalized.startswith("data:image/"):
            return url
        raise InvalidInputError(
            f"Only image data URLs are allowed for {field}", field=field, value=url
        )
    return validate_url(url, field=field)


def is_safe_url(url: str) -> bool:
    """Return True when ``validate_url`` would accept the value."""
    try:
        validate_url(url)
    except InvalidInputError:
        return False
    return True


def validate_css_length(value: str, field: str = "width") -> str:
    """
    Validate a CSS dimension such as ``300px``, ``50%``, ``1.5rem`` or ``auto``.

    Raises:
        InvalidInputError: If the value falls outside the length grammar
    """
    if not isinstance(value, str) or not _CSS_LENGTH.fullmatch(value):
        raise InvalidInputError(
            f"Invalid CSS {field} value: {value!r}. Must be a CSS length "
            "(e.g. '300px', '50%', '20rem', 'auto')",
            field=field,
            value=value if isinstance(value, str) else None,
        )
    return value


def validate_style_declaration(prop: str, value: str) -> None:
    """Validate one inline style declaration."""
    if not isinstance(prop, str) or not _STYLE_PROPERTY.fullmatch(prop):
        raise InvalidInputError(f"Invalid CSS property name: {prop!r}", field="style", value=prop)
    if not isinstance(value, str) or not value.strip() or _STYLE_VALUE_FORBIDDEN.search(value):
        raise InvalidInputError(
            f"Invalid CSS value for {prop}: {value!r}", field="style", value=value
        )


def validate_dom_id(value: str, field: str = "id") -> str:
    """
    Validate an id that will be used as a client-side selector or swap target.

    Raises:
        InvalidInputError: Unless the value matches ``[A-Za-z0-9_-]+``
    """
    if not isinstance(value, str) or not _DOM_ID.fullmatch(value):
        raise InvalidInputError(
            f"Invalid {field}: {value!r}. Only letters, digits, '-' and '_' are allowed",
            field=field,
            value=value if isinstance(value, str) else None,
        )
    return value


def validate_attribute_name(name: str) -> str:
    """Validate an attribute name before it is stored on a node."""
    if not isinstance(name, str) or not _ATTRIBUTE_NAME.fullmatch(name):
        raise InvalidInputError(
            f"Invalid attribute name: {name!r}",
            field="attribute",
            value=name if isinstance(name, str) else None,
        )
    return name


def validate_tag_name(name: str) -> str:
    """Validate an element name."""
    if not isinstance(name, str) or not _TAG_NAME.fullmatch(name):
        raise InvalidInputError(
            f"Invalid tag name: {name!r}", field="tag", value=name if isinstance(name, str) else None
        )
    return name
