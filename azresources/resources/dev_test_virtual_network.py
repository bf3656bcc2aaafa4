"""Resource ``azurerm_dev_test_virtual_network``.

A virtual network inside a DevTest Lab. The lab exposes a single subnet
override per network; its permissions control whether lab virtual machines
may be created in the subnet and whether they may get public IP addresses.
"""

import logging
from typing import Any, Dict, List, Optional

from azure.core.exceptions import HttpResponseError
from azure.mgmt.devtestlabs.models import SubnetOverride, VirtualNetwork

from azresources.exceptions import ResourceOperationError
from azresources.schema import TYPE_LIST, TYPE_STRING, Resource, ResourceData, Schema
from azresources.utils.azure_utils import (
    parse_azure_resource_id,
    schema_resource_group_name_diff_suppress,
)
from azresources.utils.response import enum_value, import_as_exists_error, was_not_found
from azresources.utils.tags import expand_tags, flatten_and_set_tags, tags_schema
from azresources.utils.validate import (
    dev_test_lab_name,
    dev_test_virtual_network_usage_permission_type,
    string_match,
)

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "azurerm_dev_test_virtual_network"
PERMISSION_ALLOW = "Allow"
SUBNET_ID_FORMAT = (
    "/subscriptions/{subscription_id}/resourceGroups/{resource_group}"
    "/providers/Microsoft.Network/virtualNetworks/{network}/subnets/{subnet}"
)


def validate_dev_test_virtual_network_name():
    return string_match(
        r"^[A-Za-z0-9_-]+$",
        "Virtual Network Name can only include alphanumeric characters, underscores, hyphens.",
    )


def resource_dev_test_virtual_network() -> Resource:
    return Resource(
        create=create_dev_test_virtual_network,
        read=read_dev_test_virtual_network,
        update=update_dev_test_virtual_network,
        delete=delete_dev_test_virtual_network,
        importable=True,
        schema={
            "name": Schema(
                type=TYPE_STRING,
                required=True,
                force_new=True,
                validate_func=validate_dev_test_virtual_network_name(),
            ),
            "lab_name": Schema(
                type=TYPE_STRING,
                required=True,
                force_new=True,
                validate_func=dev_test_lab_name(),
            ),
            # the API returns the resource group in lower case
            "resource_group_name": schema_resource_group_name_diff_suppress(),
            "description": Schema(type=TYPE_STRING, optional=True),
            "subnet": Schema(
                type=TYPE_LIST,
                optional=True,
                computed=True,
                # the API accepts several, but only one is usable
                max_items=1,
                elem=Resource(
                    schema={
                        "name": Schema(type=TYPE_STRING, computed=True),
                        "use_in_virtual_machine_creation": Schema(
                            type=TYPE_STRING,
                            optional=True,
                            default=PERMISSION_ALLOW,
                            validate_func=dev_test_virtual_network_usage_permission_type(),
                        ),
                        "use_public_ip_address": Schema(
                            type=TYPE_STRING,
                            optional=True,
                            default=PERMISSION_ALLOW,
                            validate_func=dev_test_virtual_network_usage_permission_type(),
                        ),
                    }
                ),
            ),
            "tags": tags_schema(),
            "unique_identifier": Schema(type=TYPE_STRING, computed=True),
        },
    )


def _describe(name: str, lab_name: str, resource_group: str) -> str:
    return (
        f"DevTest Virtual Network {name!r} "
        f"(Lab {lab_name!r} / Resource Group {resource_group!r})"
    )


def _id_parts(d: ResourceData):
    resource_id = parse_azure_resource_id(d.id)
    return (
        resource_id.resource_group,
        resource_id.path_value("labs"),
        resource_id.path_value("virtualnetworks"),
    )


def expand_dev_test_virtual_network_subnets(
    subnets: List[Dict[str, Any]],
    subscription_id: str,
    resource_group: str,
    network_name: str,
) -> List[SubnetOverride]:
    """Build subnet overrides from the ``subnet`` blocks of the configuration.

    The subnet name and ID are not configurable; they follow the defaults the
    Azure Portal uses. Without any block a single override allowing both VM
    creation and public IP addresses is produced.
    """
    name = f"{network_name}Subnet"
    subnet_id = SUBNET_ID_FORMAT.format(
        subscription_id=subscription_id,
        resource_group=resource_group,
        network=network_name,
        subnet=name,
    )

    if not subnets:
        return [
            SubnetOverride(
                resource_id=subnet_id,
                lab_subnet_name=name,
                use_public_ip_address_permission=PERMISSION_ALLOW,
                use_in_vm_creation_permission=PERMISSION_ALLOW,
            )
        ]

    return [
        SubnetOverride(
            resource_id=subnet_id,
            lab_subnet_name=name,
            use_public_ip_address_permission=subnet.get(
                "use_public_ip_address", PERMISSION_ALLOW
            ),
            use_in_vm_creation_permission=subnet.get(
                "use_in_virtual_machine_creation", PERMISSION_ALLOW
            ),
        )
        for subnet in subnets
    ]


def flatten_dev_test_virtual_network_subnets(
    overrides: Optional[List[Any]],
) -> List[Dict[str, Any]]:
    if overrides is None:
        return []

    outputs = []
    for override in overrides:
        output: Dict[str, Any] = {}
        if override.lab_subnet_name is not None:
            output["name"] = override.lab_subnet_name
        output["use_public_ip_address"] = enum_value(
            override.use_public_ip_address_permission
        )
        output["use_in_virtual_machine_creation"] = enum_value(
            override.use_in_vm_creation_permission
        )
        outputs.append(output)
    return outputs


def _build_parameters(d: ResourceData, meta: Any) -> VirtualNetwork:
    name = d.get("name")
    resource_group = d.get("resource_group_name")
    subnets = expand_dev_test_virtual_network_subnets(
        d.get("subnet"), meta.subscription_id, resource_group, name
    )
    return VirtualNetwork(
        tags=expand_tags(d.get("tags")),
        description=d.get("description"),
        subnet_overrides=subnets,
    )


def _create_or_update(d: ResourceData, meta: Any, action: str, noun: str) -> None:
    client = meta.devtestlabs.virtual_networks

    name = d.get("name")
    lab_name = d.get("lab_name")
    resource_group = d.get("resource_group_name")
    description = _describe(name, lab_name, resource_group)

    parameters = _build_parameters(d, meta)

    try:
        poller = client.begin_create_or_update(resource_group, lab_name, name, parameters)
    except HttpResponseError as e:
        raise ResourceOperationError(f"Error {action} {description}: {e}") from e

    try:
        poller.result()
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error waiting for {noun} of {description}: {e}"
        ) from e

    try:
        read = client.get(resource_group, lab_name, name)
    except HttpResponseError as e:
        raise ResourceOperationError(f"Error retrieving {description}: {e}") from e
    if not read.id:
        raise ResourceOperationError(f"Cannot read {description} ID")

    d.set_id(read.id)


def create_dev_test_virtual_network(d: ResourceData, meta: Any) -> None:
    client = meta.devtestlabs.virtual_networks

    logger.info("preparing arguments for DevTest Virtual Network creation")

    name = d.get("name")
    lab_name = d.get("lab_name")
    resource_group = d.get("resource_group_name")

    if meta.require_resources_to_be_imported and d.is_new_resource():
        existing = None
        try:
            existing = client.get(resource_group, lab_name, name)
        except HttpResponseError as e:
            if not was_not_found(e):
                raise ResourceOperationError(
                    f"Error checking for presence of existing "
                    f"{_describe(name, lab_name, resource_group)}: {e}"
                ) from e
        if existing is not None and existing.id:
            raise import_as_exists_error(RESOURCE_TYPE, existing.id)

    _create_or_update(d, meta, "creating", "creation")

    update_dev_test_virtual_network(d, meta)


def update_dev_test_virtual_network(d: ResourceData, meta: Any) -> None:
    logger.info("preparing arguments for DevTest Virtual Network update")

    _create_or_update(d, meta, "updating", "update")

    read_dev_test_virtual_network(d, meta)


def read_dev_test_virtual_network(d: ResourceData, meta: Any) -> None:
    client = meta.devtestlabs.virtual_networks

    resource_group, lab_name, name = _id_parts(d)

    try:
        read = client.get(resource_group, lab_name, name)
    except HttpResponseError as e:
        if was_not_found(e):
            logger.debug(
                f"DevTest Virtual Network {name!r} was not found in Lab {lab_name!r} / "
                f"Resource Group {resource_group!r} - removing from state!"
            )
            d.set_id("")
            return
        raise ResourceOperationError(
            f"Error making Read request on {_describe(name, lab_name, resource_group)}: {e}"
        ) from e

    d.set("name", read.name)
    d.set("lab_name", lab_name)
    d.set("resource_group_name", resource_group)

    d.set("description", read.description)
    d.set("subnet", flatten_dev_test_virtual_network_subnets(read.subnet_overrides))
    d.set("unique_identifier", read.unique_identifier)

    flatten_and_set_tags(d, read.tags)


def delete_dev_test_virtual_network(d: ResourceData, meta: Any) -> None:
    client = meta.devtestlabs.virtual_networks

    resource_group, lab_name, name = _id_parts(d)
    description = _describe(name, lab_name, resource_group)

    try:
        client.get(resource_group, lab_name, name)
    except HttpResponseError as e:
        if was_not_found(e):
            # deleted outside of armprovision
            logger.debug(f"{description} was not found - assuming removed!")
            return
        raise ResourceOperationError(f"Error retrieving {description}: {e}") from e

    try:
        poller = client.begin_delete(resource_group, lab_name, name)
    except HttpResponseError as e:
        raise ResourceOperationError(f"Error deleting {description}: {e}") from e

    try:
        poller.result()
    except HttpResponseError as e:
        raise ResourceOperationError(
            f"Error waiting for the deletion of {description}: {e}"
        ) from e
