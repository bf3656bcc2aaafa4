"""Helpers for interpreting Azure SDK errors."""

from typing import Any

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from azresources.exceptions import ImportAsExistsError


def was_not_found(error: BaseException) -> bool:
    """Return True when an SDK error represents an HTTP 404."""
    if isinstance(error, ResourceNotFoundError):
        return True
    if isinstance(error, HttpResponseError):
        return getattr(error, "status_code", None) == 404
    return False


def import_as_exists_error(resource_type: str, resource_id: str) -> ImportAsExistsError:
    return ImportAsExistsError(resource_type, resource_id)


def enum_value(value: Any) -> Any:
    """Unwrap SDK enum members to their plain string value."""
    return getattr(value, "value", value)
