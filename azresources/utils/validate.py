"""Reusable schema validation functions.

Every validator has the signature ``fn(value, key) -> (warnings, errors)``
where both lists hold human-readable strings. Factories such as
``string_in_slice`` return a validator.
"""

import re
from typing import Any, Iterable, List, Optional, Tuple

Result = Tuple[List[str], List[str]]


def regex_helper(value: Any, key: str, pattern: str) -> Tuple[bool, List[str]]:
    """Check that a value is a string matching ``pattern`` anywhere.

    Returns:
        Tuple of (matched, type errors)
    """
    if not isinstance(value, str):
        return False, [f"expected type of \"{key}\" to be string"]
    return re.search(pattern, value) is not None, []


def no_empty_strings(value: Any, key: str) -> Result:
    if not isinstance(value, str):
        return [], [f"expected type of \"{key}\" to be string"]
    if not value.strip():
        return [], [f"\"{key}\" must not be empty"]
    return [], []


def string_in_slice(valid: Iterable[str], ignore_case: bool = False):
    """Build a validator accepting only the listed values."""
    valid = list(valid)

    def validator(value: Any, key: str) -> Result:
        if not isinstance(value, str):
            return [], [f"expected type of {key} to be string"]
        for option in valid:
            if value == option or (ignore_case and value.lower() == option.lower()):
                return [], []
        return [], [f"expected {key} to be one of {valid}, got {value}"]

    return validator


def string_match(pattern: str, message: Optional[str] = None):
    """Build a validator requiring a match of ``pattern``."""
    compiled = re.compile(pattern)

    def validator(value: Any, key: str) -> Result:
        if not isinstance(value, str):
            return [], [f"expected type of {key} to be string"]
        if not compiled.search(value):
            if message:
                return [], [f"invalid value for {key} ({message})"]
            return [], [
                f"expected value of {key} to match regular expression {pattern!r}"
            ]
        return [], []

    return validator


def dev_test_lab_name():
    return string_match(
        r"^[A-Za-z0-9_-]+$",
        "Lab Name can only include alphanumeric characters, underscores, hyphens.",
    )


def dev_test_virtual_network_usage_permission_type():
    return string_in_slice(["Allow", "Default", "Deny"], ignore_case=False)


def data_lake_account_name():
    # lowercase letters and digits only, 3-24 characters
    return string_match(
        r"^[a-z0-9]{3,24}$",
        "Data Lake account name can only contain lowercase letters and numbers "
        "and must be between 3 and 24 characters long",
    )
