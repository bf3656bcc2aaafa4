"""
Provider runtime: the registry of resource and data source definitions.

The provider discovers the definitions exported by ``azresources.resources``,
hands out ``Resource`` objects by type name and builds the ``ArmClient``
that every CRUD function receives as ``meta``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional
import logging

from azresources.clients import ArmClient
from azresources.config_loader import ArmConfig
from azresources.exceptions import UnknownResourceTypeError
from azresources.schema import Resource

logger = logging.getLogger(__name__)

KIND_RESOURCE = "resource"
KIND_DATA_SOURCE = "data"


@dataclass
class ResourceDescriptor:
    """
    Descriptor for one registered type.

    Args:
        type_name: Terraform-style type name (e.g., "azurerm_dev_test_virtual_network")
        kind: KIND_RESOURCE or KIND_DATA_SOURCE
        factory: Callable returning the ``Resource`` definition
    """

    type_name: str
    kind: str
    factory: Callable[[], Resource]


class Provider:
    """
    Runtime registry of resource definitions.

    Responsibilities:
    - Lookup of resource and data source definitions by type name
    - Lazy construction (and caching) of ``Resource`` objects
    - Building the ``ArmClient`` from provider configuration
    """

    def __init__(self, descriptors: Optional[List[ResourceDescriptor]] = None):
        """
        Initialize the provider with resource descriptors.

        Args:
            descriptors: Descriptors to register. If None, registers every
                definition exported by ``azresources.resources``.
        """
        if descriptors is None:
            descriptors = self._get_default_descriptors()

        self.descriptors: Dict[str, Dict[str, ResourceDescriptor]] = {
            KIND_RESOURCE: {},
            KIND_DATA_SOURCE: {},
        }
        self._built: Dict[tuple, Resource] = {}  # (kind, type) -> Resource
        for descriptor in descriptors:
            self.register(descriptor)

    @staticmethod
    def _get_default_descriptors() -> List[ResourceDescriptor]:
        from azresources.resources import DATA_SOURCE_FACTORIES, RESOURCE_FACTORIES

        descriptors = [
            ResourceDescriptor(type_name, KIND_RESOURCE, factory)
            for type_name, factory in RESOURCE_FACTORIES.items()
        ]
        descriptors += [
            ResourceDescriptor(type_name, KIND_DATA_SOURCE, factory)
            for type_name, factory in DATA_SOURCE_FACTORIES.items()
        ]
        return descriptors

    def register(self, descriptor: ResourceDescriptor) -> None:
        """
        Register a resource descriptor.

        Raises:
            ValueError: If the type is already registered for that kind
        """
        registry = self.descriptors[descriptor.kind]
        if descriptor.type_name in registry:
            raise ValueError(
                f"{descriptor.kind} '{descriptor.type_name}' already registered"
            )
        registry[descriptor.type_name] = descriptor

    def _lookup(self, kind: str, type_name: str) -> Resource:
        key = (kind, type_name)
        if key not in self._built:
            descriptor = self.descriptors[kind].get(type_name)
            if descriptor is None:
                raise UnknownResourceTypeError(
                    f"Unknown {kind} type '{type_name}'",
                    context={"supported": ", ".join(sorted(self.descriptors[kind]))},
                )
            self._built[key] = descriptor.factory()
        return self._built[key]

    @property
    def resources_map(self) -> Dict[str, Resource]:
        return {name: self.resource(name) for name in sorted(self.descriptors[KIND_RESOURCE])}

    @property
    def data_sources_map(self) -> Dict[str, Resource]:
        return {
            name: self.data_source(name)
            for name in sorted(self.descriptors[KIND_DATA_SOURCE])
        }

    def resource(self, type_name: str) -> Resource:
        """Return the resource definition registered as ``type_name``."""
        return self._lookup(KIND_RESOURCE, type_name)

    def data_source(self, type_name: str) -> Resource:
        """Return the data source definition registered as ``type_name``."""
        return self._lookup(KIND_DATA_SOURCE, type_name)

    def get(self, kind: str, type_name: str) -> Resource:
        return self._lookup(kind, type_name)

    def schemas(self) -> Dict[str, Dict[str, Any]]:
        """Describe every registered type as JSON-serializable schema dictionaries."""
        return {
            "resources": {n: r.schema_dict() for n, r in self.resources_map.items()},
            "data_sources": {
                n: r.schema_dict() for n, r in self.data_sources_map.items()
            },
        }

    def configure(self, config: ArmConfig) -> ArmClient:
        """
        Validate provider configuration and build the API client container.

        Raises:
            ConfigurationError: If the configuration is incomplete
        """
        client = ArmClient.from_config(config)
        logger.info(f"Configured provider for subscription {config.subscription_id}")
        return client


def default_provider() -> Provider:
    """Create a Provider with every built-in resource and data source."""
    return Provider()
