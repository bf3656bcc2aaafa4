"""Resource ``azurerm_data_lake_analytics_account``.

Manages a Data Lake Analytics account bound to a default Data Lake Store
account. The tier can be changed in place; the name, location, resource
group and default store force a new account.
"""

import logging
from typing import Any, Dict

from azure.core.exceptions import HttpResponseError

from azresources.exceptions import ResourceOperationError
from azresources.schema import TYPE_STRING, Resource, ResourceData, Schema
from azresources.utils.azure_utils import (
    normalize_location,
    parse_azure_resource_id,
    schema_location,
    schema_resource_group_name,
)
from azresources.utils.response import enum_value, import_as_exists_error, was_not_found
from azresources.utils.suppress import case_difference
from azresources.utils.tags import expand_tags, flatten_and_set_tags, tags_schema
from azresources.utils.validate import data_lake_account_name, string_in_slice

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "azurerm_data_lake_analytics_account"

TIER_CONSUMPTION = "Consumption"
TIERS = [
    TIER_CONSUMPTION,
    "Commitment_100000AUHours",
    "Commitment_10000AUHours",
    "Commitment_1000AUHours",
    "Commitment_100AUHours",
    "Commitment_500000AUHours",
    "Commitment_50000AUHours",
    "Commitment_5000AUHours",
    "Commitment_500AUHours",
]


def resource_data_lake_analytics_account() -> Resource:
    return Resource(
        create=create_data_lake_analytics_account,
        read=read_data_lake_analytics_account,
        update=update_data_lake_analytics_account,
        delete=delete_data_lake_analytics_account,
        importable=True,
        schema={
            "name": Schema(
                type=TYPE_STRING,
                required=True,
                force_new=True,
                validate_func=data_lake_account_name(),
            ),
            "location": schema_location(),
            "resource_group_name": schema_resource_group_name(),
            "tier": Schema(
                type=TYPE_STRING,
                optional=True,
                default=TIER_CONSUMPTION,
                diff_suppress_func=case_difference,
                validate_func=string_in_slice(TIERS, ignore_case=True),
            ),
            "default_store_account_name": Schema(
                type=TYPE_STRING,
                required=True,
                force_new=True,
                validate_func=data_lake_account_name(),
            ),
            "tags": tags_schema(),
        },
    )


def _describe(name: str, resource_group: str) -> str:
    return f"Data Lake Analytics Account {name!r} (Resource Group {resource_group!r})"


def _id_parts(d: ResourceData):
    resource_id = parse_azure_resource_id(d.id)
    return resource_id.resource_group, resource_id.path_value("accounts")


def build_create_parameters(
    location: str, tier: str, store_account_name: str, tags: Dict[str, Any]
) -> Dict[str, Any]:
    """Request body for ``accounts.begin_create``."""
    return {
        "location": location,
        "tags": expand_tags(tags),
        "properties": {
            "newTier": tier,
            "defaultDataLakeStoreAccount": store_account_name,
            "dataLakeStoreAccounts": [{"name": store_account_name}],
        },
    }


def build_update_parameters(
    tier: str, store_account_name: str, tags: Dict[str, Any]
) -> Dict[str, Any]:
    """Request body for ``accounts.begin_update``."""
    return {
        "tags": expand_tags(tags),
        "properties": {
            "newTier": tier,
            "dataLakeStoreAccounts": [{"name": store_account_name}],
        },
    }


def create_data_lake_analytics_account(d: ResourceData, meta: Any) -> None:
    client = meta.datalake_analytics.accounts

    name = d.get("name")
    resource_group = d.get("resource_group_name")

    if meta.require_resources_to_be_imported:
        existing = None
        try:
            existing = client.get(resource_group, name)
        except HttpResponseError as e:
            if not was_not_found(e):
                raise ResourceOperationError(
                    f"Error checking for presence of existing {_describe(name, resource_group)}: {e}"
                ) from e
        if existing is not None and existing.id:
            raise import_as_exists_error(RESOURCE_TYPE, existing.id)

    location = normalize_location(d.get("location"))
    store_account_name = d.get("default_store_account_name")
    tier = d.get("tier")
    tags = d.get("tags")

    logger.info(
        f"preparing arguments for Data Lake Analytics Account creation {name!r} "
        f"(Resource Group {resource_group!r})"
    )

    parameters = build_create_parameters(location, tier, store_account_name, tags)

    try:
        poller = client.begin_create(resource_group, name, parameters)
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error issuing create request for {_describe(name, resource_group)}: {e}"
        ) from e

    try:
        poller.result()
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error creating {_describe(name, resource_group)}: {e}"
        ) from e

    try:
        read = client.get(resource_group, name)
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error retrieving {_describe(name, resource_group)}: {e}"
        ) from e
    if not read.id:
        raise ResourceOperationError(
            f"Cannot read {_describe(name, resource_group)} ID"
        )

    d.set_id(read.id)

    read_data_lake_analytics_account(d, meta)


def update_data_lake_analytics_account(d: ResourceData, meta: Any) -> None:
    client = meta.datalake_analytics.accounts

    name = d.get("name")
    resource_group = d.get("resource_group_name")
    store_account_name = d.get("default_store_account_name")
    new_tier = d.get("tier")
    new_tags = d.get("tags")

    parameters = build_update_parameters(new_tier, store_account_name, new_tags)

    try:
        poller = client.begin_update(resource_group, name, parameters)
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error issuing update request for {_describe(name, resource_group)}: {e}"
        ) from e

    try:
        poller.result()
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error waiting for the update of {_describe(name, resource_group)} to complete: {e}"
        ) from e

    read_data_lake_analytics_account(d, meta)


def read_data_lake_analytics_account(d: ResourceData, meta: Any) -> None:
    client = meta.datalake_analytics.accounts

    resource_group, name = _id_parts(d)

    try:
        resp = client.get(resource_group, name)
    except HttpResponseError as e:
        if was_not_found(e):
            logger.warning(
                f"Data Lake Analytics Account {name!r} was not found "
                f"(resource group {resource_group!r})"
            )
            d.set_id("")
            return
        raise ResourceOperationError(
            f"Error making Read request on Azure {_describe(name, resource_group)}: {e}"
        ) from e

    d.set("name", name)
    d.set("resource_group_name", resource_group)
    if resp.location:
        d.set("location", normalize_location(resp.location))

    if resp.current_tier is not None:
        d.set("tier", enum_value(resp.current_tier))
    if resp.default_data_lake_store_account is not None:
        d.set("default_store_account_name", resp.default_data_lake_store_account)

    flatten_and_set_tags(d, resp.tags)


def delete_data_lake_analytics_account(d: ResourceData, meta: Any) -> None:
    client = meta.datalake_analytics.accounts

    resource_group, name = _id_parts(d)

    try:
        poller = client.begin_delete(resource_group, name)
    except HttpResponseError as e:
        if was_not_found(e):
            return
        raise ResourceOperationError(
            f"Error issuing delete request for {_describe(name, resource_group)}: {e}"
        ) from e

    try:
        poller.result()
    except HttpResponseError as e:
        if was_not_found(e):
            return
        raise ResourceOperationError(
            f"Error deleting {_describe(name, resource_group)}: {e}"
        ) from e
