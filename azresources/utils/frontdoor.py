"""Name validation for Azure Front Door resources."""

from typing import Any, List, Tuple

from azresources.utils.validate import regex_helper

FRONT_DOOR_NAME_PATTERN = r"(^[\da-zA-Z])([-\da-zA-Z]{3,61})([\da-zA-Z]$)"
ROUTING_RULE_NAME_PATTERN = r"(^[\da-zA-Z])([-\da-zA-Z]{1,88})([\da-zA-Z]$)"


def validate_front_door_name(value: Any, key: str) -> Tuple[List[str], List[str]]:
    """Front Door names begin and end with a letter or number and may contain hyphens."""
    matched, errors = regex_helper(value, key, FRONT_DOOR_NAME_PATTERN)
    if not matched:
        errors.append(
            f"\"{key}\" must be between 5 and 63 characters in length and begin with a "
            f"letter or number, end with a letter or number and may contain only "
            f"letters, numbers or hyphens."
        )
    return [], errors


def validate_backend_pool_routing_rule_name(
    value: Any, key: str
) -> Tuple[List[str], List[str]]:
    matched, errors = regex_helper(value, key, ROUTING_RULE_NAME_PATTERN)
    if not matched:
        errors.append(
            f"\"{key}\" must be between 1 and 90 characters in length and begin with a "
            f"letter or number, end with a letter or number and may contain only "
            f"letters, numbers or hyphens."
        )
    return [], errors
