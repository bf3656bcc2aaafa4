"""Custom exception types for armprovision.

Exception Hierarchy:
    ProviderError (base)
    ├── ResourceValidationError - Configuration failed schema validation
    ├── ResourceIdError - An Azure resource ID could not be parsed
    ├── ImportAsExistsError - Resource exists and must be imported first
    ├── UnknownResourceTypeError - No resource registered under a type name
    ├── ResourceOperationError - An Azure API call failed
    └── ConfigurationError - Provider configuration is incomplete or invalid
"""

from typing import Any, Dict, List, Optional


class ProviderError(Exception):
    """Base exception for all provider errors.

    Attributes:
        message: Human-readable error description
        context: Additional contextual information (resource type, IDs, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ResourceValidationError(ProviderError):
    """Raised when configuration does not satisfy a resource schema.

    Every individual problem is kept in ``errors`` so callers can show
    all of them at once.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.errors = list(errors or [])

    def __str__(self) -> str:
        base = super().__str__()
        if self.errors:
            return base + "\n  - " + "\n  - ".join(self.errors)
        return base


class ResourceIdError(ProviderError):
    """Raised when an Azure resource ID is malformed.

    Examples:
        - ID does not start with a slash
        - Odd number of path segments
        - Missing subscription or resource group segment
    """

    pass


class ImportAsExistsError(ProviderError):
    """Raised when creating a resource that already exists remotely."""

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"A resource with the ID {resource_id!r} already exists - to be managed "
            f"it needs to be imported into the State. Please see the resource "
            f"documentation for {resource_type!r} for more information.",
            context={"resource_type": resource_type},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class UnknownResourceTypeError(ProviderError):
    """Raised when a resource or data source type is not registered."""

    pass


class ResourceOperationError(ProviderError):
    """Raised when an Azure management API call fails.

    The SDK exception is chained as ``__cause__``.
    """

    pass


class ConfigurationError(ProviderError):
    """Raised when provider configuration is missing or invalid."""

    pass
