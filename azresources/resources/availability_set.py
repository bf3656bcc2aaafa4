"""Data source ``azurerm_availability_set``: look up an existing Availability Set."""

import logging
from typing import Any

from azure.core.exceptions import HttpResponseError

from azresources.exceptions import ResourceOperationError
from azresources.schema import TYPE_BOOL, TYPE_STRING, Resource, ResourceData, Schema
from azresources.utils.azure_utils import (
    normalize_location,
    schema_resource_group_name_for_data_source,
)
from azresources.utils.response import was_not_found
from azresources.utils.tags import flatten_and_set_tags, tags_for_data_source_schema
from azresources.utils.validate import no_empty_strings

logger = logging.getLogger(__name__)


def data_source_availability_set() -> Resource:
    return Resource(
        read=read_availability_set,
        schema={
            "resource_group_name": schema_resource_group_name_for_data_source(),
            "name": Schema(
                type=TYPE_STRING, required=True, validate_func=no_empty_strings
            ),
            "location": Schema(type=TYPE_STRING, computed=True),
            "platform_update_domain_count": Schema(type=TYPE_STRING, computed=True),
            "platform_fault_domain_count": Schema(type=TYPE_STRING, computed=True),
            "managed": Schema(type=TYPE_BOOL, computed=True),
            "tags": tags_for_data_source_schema(),
        },
    )


def read_availability_set(d: ResourceData, meta: Any) -> None:
    client = meta.compute.availability_sets

    resource_group = d.get("resource_group_name")
    name = d.get("name")

    try:
        resp = client.get(resource_group, name)
    except HttpResponseError as e:
        if was_not_found(e):
            raise ResourceOperationError(
                f"Error: Availability Set {name!r} (Resource Group {resource_group!r}) was not found"
            ) from e
        raise ResourceOperationError(
            f"Error making Read request on Availability Set {name!r} "
            f"(Resource Group {resource_group!r}): {e}"
        ) from e

    d.set_id(resp.id)
    if resp.location:
        d.set("location", normalize_location(resp.location))
    if resp.sku is not None and resp.sku.name:
        # "Aligned" availability sets use managed disks
        d.set("managed", resp.sku.name.lower() == "aligned")
    if resp.platform_update_domain_count is not None:
        d.set("platform_update_domain_count", str(resp.platform_update_domain_count))
    if resp.platform_fault_domain_count is not None:
        d.set("platform_fault_domain_count", str(resp.platform_fault_domain_count))
    flatten_and_set_tags(d, resp.tags)
