"""Diff suppression functions: ``fn(key, old, new) -> bool``."""

from typing import Any


def case_difference(key: str, old: Any, new: Any) -> bool:
    return str(old).lower() == str(new).lower()
