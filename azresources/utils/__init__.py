"""Utility modules for armprovision.

This package contains helpers shared across resources: Azure resource ID
parsing, schema builders, validators, diff suppression, tag handling and
SDK error interpretation.
"""

from .azure_utils import (
    ResourceID,
    normalize_location,
    parse_azure_resource_id,
    schema_location,
    schema_resource_group_name,
    schema_resource_group_name_diff_suppress,
    schema_resource_group_name_for_data_source,
)
from .response import import_as_exists_error, was_not_found
from .tags import expand_tags, flatten_and_set_tags, tags_for_data_source_schema, tags_schema

__all__ = [
    # Azure helpers
    "ResourceID",
    "normalize_location",
    "parse_azure_resource_id",
    "schema_location",
    "schema_resource_group_name",
    "schema_resource_group_name_diff_suppress",
    "schema_resource_group_name_for_data_source",
    # SDK responses
    "import_as_exists_error",
    "was_not_found",
    # Tags
    "expand_tags",
    "flatten_and_set_tags",
    "tags_for_data_source_schema",
    "tags_schema",
]
