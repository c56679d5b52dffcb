"""
Helpers for turning pydantic validation errors into user-facing messages
"""
import re
from typing import Any, Dict, Iterable, List

# Request sections FastAPI prefixes onto error locations
_LOCATION_PREFIXES = {"body", "query", "path", "header"}


def humanize_field(field: str) -> str:
    """``previewImage`` -> ``Preview image``"""
    words = re.sub(r"(?<!^)(?=[A-Z])", " ", field.split(".")[-1]).replace("_", " ")
    return words.lower().capitalize()


def error_field(error: Dict[str, Any]) -> str:
    """Dotted field path of a validation error, without the request section"""
    loc = [str(part) for part in error.get("loc", ())]
    if loc and loc[0] in _LOCATION_PREFIXES:
        loc = loc[1:]
    return ".".join(loc)


def error_message(error: Dict[str, Any]) -> str:
    """
    Message for a single validation error.

    Errors raised by our own validators (``value_error``) keep their
    message verbatim and missing fields read "<Field> is required".
    Anything else is prefixed with the field name.
    """
    field = error_field(error)
    ctx_error = (error.get("ctx") or {}).get("error")
    if error.get("type") == "value_error" and ctx_error is not None:
        return str(ctx_error)
    if error.get("type") == "missing":
        return f"{humanize_field(field) if field else 'Value'} is required"
    if field:
        return f"{humanize_field(field)}: {error.get('msg')}"
    return str(error.get("msg"))


def format_validation_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Format validation errors for the error response details"""
    return [
        {
            "field": error_field(error),
            "message": error_message(error),
            "type": error.get("type", "value_error"),
        }
        for error in errors
    ]


def join_validation_messages(errors: Iterable[Dict[str, Any]]) -> str:
    """Combine all field-level messages into one message"""
    return ", ".join(error_message(error) for error in errors)
