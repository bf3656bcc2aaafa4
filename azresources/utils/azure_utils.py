"""Azure specific helpers: locations, resource IDs and shared schemas.

Resource IDs look like::

    /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}

``parse_azure_resource_id`` splits them into key/value pairs so each
resource can pull the segments it needs (``id.path["accounts"]``).
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from azresources.exceptions import ResourceIdError
from azresources.schema import TYPE_STRING, Schema
from azresources.utils.suppress import case_difference
from azresources.utils.validate import no_empty_strings

RESOURCE_GROUP_NAME_MAX_LENGTH = 90
RE_RESOURCE_GROUP_NAME = re.compile(r"^[-\w\._\(\)]+$", re.ASCII)


@dataclass
class ResourceID:
    """Parsed representation of an Azure resource ID."""

    subscription_id: str
    resource_group: str
    provider: str = ""
    path: Dict[str, str] = field(default_factory=dict)

    def path_value(self, key: str) -> Optional[str]:
        """Look up a path segment, falling back to a case-insensitive match.

        Some Azure APIs return IDs with lower-cased segment names.
        """
        if key in self.path:
            return self.path[key]
        for k, v in self.path.items():
            if k.lower() == key.lower():
                return v
        return None


def parse_azure_resource_id(resource_id: str) -> ResourceID:
    """Parse an Azure resource ID into its components.

    Args:
        resource_id: Full ARM resource ID

    Returns:
        ResourceID with subscription, resource group, provider namespace and
        the remaining key/value path segments

    Raises:
        ResourceIdError: If the ID is malformed
    """
    if not isinstance(resource_id, str) or not resource_id.startswith("/"):
        raise ResourceIdError(
            f"Cannot parse Azure ID: {resource_id!r} is not an absolute path"
        )

    path = resource_id.split("?", 1)[0].strip("/")
    components = path.split("/")
    if len(components) % 2 != 0:
        raise ResourceIdError(
            f"The number of path segments is not divisible by 2 in {path!r}"
        )

    subscription_id = ""
    component_map: Dict[str, str] = {}
    for key, value in zip(components[0::2], components[1::2]):
        if not key or not value:
            raise ResourceIdError(
                f"Key/Value cannot be empty strings. Key: {key!r}, Value: {value!r}"
            )
        # the first "subscriptions" segment is the subscription, later ones
        # belong to the resource itself
        if key == "subscriptions" and not subscription_id:
            subscription_id = value
        else:
            component_map[key] = value

    if not subscription_id:
        raise ResourceIdError(f"No subscription ID found in: {path!r}")

    if "resourceGroups" in component_map:
        resource_group = component_map.pop("resourceGroups")
    elif "resourcegroups" in component_map:
        resource_group = component_map.pop("resourcegroups")
    else:
        raise ResourceIdError(f"No resource group name found in: {path!r}")

    provider = component_map.pop("providers", "")
    return ResourceID(
        subscription_id=subscription_id,
        resource_group=resource_group,
        provider=provider,
        path=component_map,
    )


def normalize_location(location: Any) -> str:
    return str(location).replace(" ", "").lower()


def suppress_location_diff(key: str, old: Any, new: Any) -> bool:
    return normalize_location(old) == normalize_location(new)


def validate_resource_group_name(value: Any, key: str) -> Tuple[List[str], List[str]]:
    if not isinstance(value, str):
        return [], [f"expected type of \"{key}\" to be string"]
    errors = []
    if len(value) > RESOURCE_GROUP_NAME_MAX_LENGTH:
        errors.append(
            f"\"{key}\" may not exceed {RESOURCE_GROUP_NAME_MAX_LENGTH} characters in length"
        )
    if value.endswith("."):
        errors.append(f"\"{key}\" may not end with a period")
    if not RE_RESOURCE_GROUP_NAME.match(value):
        errors.append(
            f"\"{key}\" may only contain alphanumeric characters, dash, underscores, "
            f"parentheses and periods"
        )
    return [], errors


def schema_location() -> Schema:
    return Schema(
        type=TYPE_STRING,
        required=True,
        force_new=True,
        diff_suppress_func=suppress_location_diff,
    )


def schema_resource_group_name() -> Schema:
    return Schema(
        type=TYPE_STRING,
        required=True,
        force_new=True,
        validate_func=validate_resource_group_name,
    )


def schema_resource_group_name_diff_suppress() -> Schema:
    return Schema(
        type=TYPE_STRING,
        required=True,
        force_new=True,
        diff_suppress_func=case_difference,
        validate_func=validate_resource_group_name,
    )


def schema_resource_group_name_for_data_source() -> Schema:
    return Schema(type=TYPE_STRING, required=True, validate_func=no_empty_strings)
