"""Tag schema, validation and conversion shared by every resource."""

from typing import Any, Dict, List, Optional, Tuple

from azresources.schema import TYPE_MAP, ResourceData, Schema

MAX_TAG_COUNT = 50
MAX_TAG_KEY_LENGTH = 512
MAX_TAG_VALUE_LENGTH = 256


def tag_value_to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float, str)):
        return str(value)
    raise ValueError(f"unknown tag type {type(value).__name__!r} in tag value")


def validate_azure_rm_tags(value: Any, key: str) -> Tuple[List[str], List[str]]:
    """Validate a tags map against the limits enforced by Azure Resource Manager."""
    errors: List[str] = []
    if not isinstance(value, dict):
        return [], [f"expected type of {key} to be map"]

    if len(value) > MAX_TAG_COUNT:
        errors.append(f"a maximum of {MAX_TAG_COUNT} tags can be applied to each ARM resource")

    for tag_key, tag_value in value.items():
        if not isinstance(tag_key, str):
            errors.append(f"expected tag keys of {key} to be strings, got {tag_key!r}")
            continue
        if len(tag_key) > MAX_TAG_KEY_LENGTH:
            errors.append(
                f"the maximum length for a tag key is {MAX_TAG_KEY_LENGTH} characters: "
                f"{tag_key!r} is {len(tag_key)} characters"
            )
        try:
            text = tag_value_to_string(tag_value)
        except ValueError as e:
            errors.append(str(e))
            continue
        if len(text) > MAX_TAG_VALUE_LENGTH:
            errors.append(
                f"the maximum length for a tag value is {MAX_TAG_VALUE_LENGTH} characters: "
                f"the value for {tag_key!r} is {len(text)} characters"
            )

    return [], errors


def tags_schema() -> Schema:
    return Schema(
        type=TYPE_MAP, optional=True, computed=True, validate_func=validate_azure_rm_tags
    )


def tags_for_data_source_schema() -> Schema:
    return Schema(type=TYPE_MAP, computed=True)


def expand_tags(tags: Optional[Dict[str, Any]]) -> Dict[str, str]:
    return {str(k): tag_value_to_string(v) for k, v in (tags or {}).items()}


def flatten_tags(tags: Optional[Dict[str, Optional[str]]]) -> Dict[str, str]:
    return {k: v for k, v in (tags or {}).items() if v is not None}


def flatten_and_set_tags(d: ResourceData, tags: Optional[Dict[str, Optional[str]]]) -> None:
    d.set("tags", flatten_tags(tags))
