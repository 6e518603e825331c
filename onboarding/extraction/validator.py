"""Validates the provider's parsed JSON and keeps only usable values."""

from typing import Any

from onboarding.extraction.exceptions import ExtractionValidationError
from onboarding.extraction.models import PERSONAL_FIELDS, PROFESSIONAL_FIELDS, ExtractionResult


def validate_and_build(data: dict[str, Any]) -> ExtractionResult:
    """Validate raw parsed JSON and build an ExtractionResult.

    A missing section counts as empty. Unknown keys are dropped. Null, blank
    and literal ``"null"`` values are dropped so they can never overwrite
    what the user already typed.

    Raises:
        ExtractionValidationError: if a section or value has the wrong type.
    """
    personal = _clean_section(data.get("personal"), "personal", PERSONAL_FIELDS)
    professional = _clean_section(data.get("professional"), "professional", PROFESSIONAL_FIELDS)
    return ExtractionResult(personal=personal, professional=professional)


def _clean_section(raw: Any, name: str, allowed: tuple[str, ...]) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ExtractionValidationError(f"'{name}' must be an object")
    cleaned: dict[str, str] = {}
    for key in allowed:
        value = raw.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ExtractionValidationError(f"'{name}.{key}' must be a string or null")
        if _is_present(value):
            cleaned[key] = value.strip()
    return cleaned


def _is_present(value: str) -> bool:
    stripped = value.strip()
    return stripped != "" and stripped != "null"
