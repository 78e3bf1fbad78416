# utils/forms.py
from typing import Optional, Union

from starlette.datastructures import FormData, UploadFile

from core.constants import MAX_COLUMN_INTEGER
from core.exceptions import ValidationError


def form_scalar(form: FormData, key: str) -> Optional[str]:
    """First text value submitted under ``key``, stripped; blank or absent -> None.

    Multipart fields may be repeated, so every read goes through here before any
    business logic sees the value.
    """
    for value in form.getlist(key):
        if isinstance(value, UploadFile):
            continue
        value = value.strip()
        return value or None
    return None


def form_file(form: FormData, key: str) -> Optional[UploadFile]:
    """First uploaded file under ``key`` that actually carries a filename."""
    for value in form.getlist(key):
        if isinstance(value, UploadFile) and value.filename:
            return value
    return None


def parse_positive_int(value: Union[str, int, None], field: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Missing required field: {field}.")
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a whole number.")
    try:
        number = int(value.strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be a whole number.")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be a whole number.")
    if number <= 0:
        raise ValidationError(f"{field} must be greater than 0.")
    if number > MAX_COLUMN_INTEGER:
        raise ValidationError(f"{field} is too large.")
    return number


def parse_optional_positive_int(value: Optional[str], field: str) -> Optional[int]:
    if value is None:
        return None
    return parse_positive_int(value, field)
