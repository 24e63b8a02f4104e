"""
Text normalisation used by every service before a row is written.

Required fields must be non-blank after trimming; optional fields are
trimmed and stored as NULL when nothing is left.
"""

from typing import Any, Dict, Iterable, Optional

from stagelink.exceptions import ValidationError


def require_text(value: Optional[str], field: str, label: Optional[str] = None) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationError(
            message=f"{label or field.replace('_', ' ').capitalize()} is required",
            field=field,
        )
    return cleaned


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def clean_update(
    changes: Dict[str, Any],
    required: Iterable[str] = (),
    text_fields: Iterable[str] = (),
) -> Dict[str, Any]:
    """
    Normalise a partial update (the output of `model_dump(exclude_unset=True)`).

    Fields in `required` may be omitted but, when present, must be non-blank.
    Other fields in `text_fields` are trimmed and blank becomes None.
    """
    required = set(required)
    text_fields = set(text_fields)
    cleaned: Dict[str, Any] = {}
    for key, value in changes.items():
        if key in required:
            cleaned[key] = require_text(value, key)
        elif key in text_fields:
            cleaned[key] = optional_text(value)
        else:
            cleaned[key] = value
    return cleaned
