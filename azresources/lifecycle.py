"""Invocation of resource CRUD functions.

These functions are the host side of a resource definition: they validate
configuration, build the ``ResourceData`` for the call and return the
resulting state as a plain dictionary. A state whose ``id`` is empty means
the object no longer exists.
"""

import logging
from typing import Any, Dict, Optional

from azresources.exceptions import ProviderError, ResourceValidationError
from azresources.schema import Resource, ResourceData, requires_replacement, validate_config

logger = logging.getLogger(__name__)


def prepare_config(
    resource: Resource, config: Dict[str, Any], address: str = ""
) -> Dict[str, Any]:
    """Validate configuration and return it with schema defaults applied.

    Raises:
        ResourceValidationError: If any attribute is invalid
    """
    normalized, errors = validate_config(resource, config)
    if errors:
        raise ResourceValidationError(
            f"Invalid configuration for {address or 'resource'}",
            errors=errors,
        )
    return normalized


def _require(resource: Resource, operation: str) -> Any:
    func = getattr(resource, operation)
    if func is None:
        raise ProviderError(f"Resource does not support the {operation} operation")
    return func


def _attributes(state: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (state or {}).items() if k != "id"}


def create(
    resource: Resource, config: Dict[str, Any], meta: Any, address: str = ""
) -> Dict[str, Any]:
    func = _require(resource, "create")
    normalized = prepare_config(resource, config, address)
    d = ResourceData(resource.schema, config=normalized, is_new=True)
    logger.debug(f"Creating {address}")
    func(d, meta)
    return d.state()


def read(
    resource: Resource, state: Dict[str, Any], meta: Any, address: str = ""
) -> Dict[str, Any]:
    """Refresh state from Azure; an empty ``id`` in the result means gone."""
    func = _require(resource, "read")
    d = ResourceData(
        resource.schema, state=_attributes(state), resource_id=state.get("id", "")
    )
    logger.debug(f"Reading {address} ({d.id})")
    func(d, meta)
    return d.state()


def update(
    resource: Resource,
    config: Dict[str, Any],
    state: Dict[str, Any],
    meta: Any,
    address: str = "",
) -> Dict[str, Any]:
    """Apply configuration changes in place.

    Raises:
        ResourceValidationError: If a force-new attribute changed; such
            resources have to be destroyed and created again
    """
    func = _require(resource, "update")
    normalized = prepare_config(resource, config, address)
    replaced = requires_replacement(resource, state, normalized)
    if replaced:
        raise ResourceValidationError(
            f"{address or 'resource'} must be replaced to apply this change",
            errors=[f"{key}: forces new resource" for key in replaced],
        )
    d = ResourceData(
        resource.schema,
        config=normalized,
        state=_attributes(state),
        resource_id=state.get("id", ""),
    )
    logger.debug(f"Updating {address} ({d.id})")
    func(d, meta)
    return d.state()


def delete(
    resource: Resource, state: Dict[str, Any], meta: Any, address: str = ""
) -> None:
    func = _require(resource, "delete")
    if not state.get("id"):
        logger.debug(f"{address} has no ID, nothing to delete")
        return
    d = ResourceData(
        resource.schema, state=_attributes(state), resource_id=state["id"]
    )
    logger.debug(f"Deleting {address} ({d.id})")
    func(d, meta)


def import_resource(
    resource: Resource, resource_id: str, meta: Any, address: str = ""
) -> Dict[str, Any]:
    """Adopt an existing object by ID and read its attributes.

    Raises:
        ProviderError: If the resource is not importable or does not exist
    """
    if not resource.importable:
        raise ProviderError(f"{address or 'resource'} does not support import")
    state = read(resource, {"id": resource_id}, meta, address)
    if not state.get("id"):
        raise ProviderError(
            "Cannot import non-existent remote object",
            context={"address": address, "id": resource_id},
        )
    return state


def read_data_source(
    resource: Resource, config: Dict[str, Any], meta: Any, address: str = ""
) -> Dict[str, Any]:
    func = _require(resource, "read")
    normalized = prepare_config(resource, config, address)
    d = ResourceData(resource.schema, config=normalized)
    logger.debug(f"Reading data source {address}")
    func(d, meta)
    return d.state()
