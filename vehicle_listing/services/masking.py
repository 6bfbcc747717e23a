"""
Sensitive field masking for the audit trail.

Credentials must never reach an audit row in clear text.
A masked string keeps its length so a reviewer can still
tell that the value changed.
"""

from collections.abc import Mapping
from typing import Any

MASK_CHAR = "*"

SENSITIVE_FIELDS = frozenset({
    "password",
    "password_confirmation",
    "token",
    "verify_token",
    "apiUrl",
})


def is_sensitive(field: Any) -> bool:
    return field in SENSITIVE_FIELDS


def mask_value(field: Any, value: Any) -> Any:
    """
    Return value with sensitive data replaced by mask characters.

    Strings under a sensitive field name become MASK_CHAR * len.
    Mappings and lists are walked so that sensitive keys at any
    depth are masked too. A new structure is returned; the input
    is never modified.
    """
    if isinstance(value, Mapping):
        return {key: mask_value(key, item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [mask_value(field, item) for item in value]
    if is_sensitive(field) and isinstance(value, str):
        return MASK_CHAR * len(value)
    return value
