"""Dot-path access over JSON-like documents (nested dicts).

Used by workflow conditions (read) and the update_field action (write).
A path that cannot be walked resolves to MISSING, which is distinct from a
stored None.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any, Final


class _Missing:
    """Sentinel type for a path that does not resolve."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def split_path(path: str) -> list[str]:
    """Split a dot path into segments. Raises ValueError for an empty path or segment."""
    if not path:
        raise ValueError("Field path must not be empty")
    parts = path.split(".")
    if any(not p for p in parts):
        raise ValueError(f"Invalid field path: {path!r}")
    return parts


def get_path(document: Any, path: str) -> Any:
    """Walk path over nested mappings; return MISSING if any segment is absent.

    A segment is absent when the current value is not a mapping or does not
    contain the key.
    """
    value = document
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return MISSING
        value = value[part]
    return value


def resolve(document: Any, path: str) -> Any:
    """Return the value at path, or None when the path does not resolve."""
    value = get_path(document, path)
    return None if value is MISSING else value


def set_path(document: MutableMapping[str, Any], path: str, value: Any) -> None:
    """Set value at path, creating intermediate dicts as needed.

    Intermediates that are missing, falsy or not mappings are replaced by an
    empty dict; sibling keys along the path are left untouched.
    """
    parts = split_path(path)
    target: MutableMapping[str, Any] = document
    for part in parts[:-1]:
        child = target.get(part)
        if not child or not isinstance(child, MutableMapping):
            child = {}
            target[part] = child
        target = child
    target[parts[-1]] = value
