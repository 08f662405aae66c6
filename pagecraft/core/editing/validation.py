"""
Form Validation
===============

Validation of submitted edit forms before any mutation or review request.
"""

from dataclasses import dataclass
from typing import List, Mapping, Tuple

MAX_TITLE_LENGTH = 200
MAX_ITEM_LENGTH = 500
MODULE_KINDS = frozenset({"content", "list"})


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating form data. Invalid results always carry errors."""

    is_valid: bool
    errors: Tuple[str, ...] = ()

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def invalid(cls, *errors: str) -> "ValidationResult":
        if not errors:
            raise ValueError("An invalid result needs at least one error message")
        return cls(False, tuple(errors))

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls.invalid(*errors) if errors else cls.valid()


def validate_content_fields(fields: Mapping[str, str]) -> ValidationResult:
    errors: List[str] = []
    title = fields.get("title")
    if title is not None and not title.strip():
        errors.append("Title cannot be empty")
    if title is not None and len(title) > MAX_TITLE_LENGTH:
        errors.append(f"Title must be less than {MAX_TITLE_LENGTH} characters")
    content = fields.get("content")
    if content is not None and not content.strip():
        errors.append("Content cannot be empty")
    return ValidationResult.from_errors(errors)


def validate_list_fields(fields: Mapping[str, str]) -> ValidationResult:
    title = fields.get("title")
    if title is not None and len(title) > MAX_TITLE_LENGTH:
        return ValidationResult.invalid(f"Title must be less than {MAX_TITLE_LENGTH} characters")
    return ValidationResult.valid()


def validate_item_fields(fields: Mapping[str, str]) -> ValidationResult:
    """An item needs non-blank text of bounded length."""
    text = fields.get("text") or ""
    if not text.strip():
        return ValidationResult.invalid("Item text cannot be empty")
    if len(text) > MAX_ITEM_LENGTH:
        return ValidationResult.invalid(f"Item text must be less than {MAX_ITEM_LENGTH} characters")
    return ValidationResult.valid()


def validate_new_module_fields(fields: Mapping[str, str]) -> ValidationResult:
    """A new module needs a known type and a non-blank title."""
    errors: List[str] = []
    if fields.get("kind") not in MODULE_KINDS:
        errors.append("Choose a module type")
    title = fields.get("title") or ""
    if not title.strip():
        errors.append("Title cannot be empty")
    elif len(title) > MAX_TITLE_LENGTH:
        errors.append(f"Title must be less than {MAX_TITLE_LENGTH} characters")
    return ValidationResult.from_errors(errors)
