"""
Provider configuration loading for armprovision.

Configuration is assembled from, in increasing order of precedence:
    1. ``ArmConfig`` defaults
    2. An optional YAML provider file
    3. ``ARM_*`` environment variables

"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional
import logging
import os

import yaml

from azresources.exceptions import ConfigurationError

# Configure logging
logger = logging.getLogger(__name__)

# Environment variable names for each configuration field
ENVIRONMENT_VARIABLES = {
    "subscription_id": "ARM_SUBSCRIPTION_ID",
    "tenant_id": "ARM_TENANT_ID",
    "client_id": "ARM_CLIENT_ID",
    "client_secret": "ARM_CLIENT_SECRET",
    "environment": "ARM_ENVIRONMENT",
    "require_resources_to_be_imported": "ARM_PROVIDER_STRICT",
    "skip_provider_registration": "ARM_SKIP_PROVIDER_REGISTRATION",
}

# Azure clouds: (authority host, resource manager endpoint)
CLOUD_ENDPOINTS = {
    "public": ("login.microsoftonline.com", "https://management.azure.com"),
    "usgovernment": ("login.microsoftonline.us", "https://management.usgovcloudapi.net"),
    "china": ("login.chinacloudapi.cn", "https://management.chinacloudapi.cn"),
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass
class ArmConfig:
    """Settings needed to talk to Azure Resource Manager."""

    subscription_id: str = ""
    tenant_id: str = ""
    client_id: str = ""
    client_secret: str = ""
    environment: str = "public"
    require_resources_to_be_imported: bool = False
    skip_provider_registration: bool = False

    def use_service_principal(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)

    @property
    def authority_host(self) -> str:
        return CLOUD_ENDPOINTS[self.environment][0]

    @property
    def resource_manager_endpoint(self) -> str:
        return CLOUD_ENDPOINTS[self.environment][1]

    def validate(self) -> None:
        """
        Check that the configuration can be used to build clients.

        Raises:
            ConfigurationError: If the subscription is missing, the cloud
                environment is unknown, or a service principal is only
                partially configured
        """
        if not self.subscription_id:
            raise ConfigurationError(
                "subscription_id is required: set ARM_SUBSCRIPTION_ID or "
                "provide it in the provider configuration file"
            )
        if self.environment not in CLOUD_ENDPOINTS:
            raise ConfigurationError(
                f"Environment '{self.environment}' not supported. "
                f"Must be one of: {', '.join(sorted(CLOUD_ENDPOINTS))}"
            )
        sp_fields = [self.tenant_id, self.client_id, self.client_secret]
        if any(sp_fields) and not all(sp_fields):
            raise ConfigurationError(
                "tenant_id, client_id and client_secret must be set together",
                context={
                    "tenant_id": bool(self.tenant_id),
                    "client_id": bool(self.client_id),
                    "client_secret": bool(self.client_secret),
                },
            )
        logger.debug(f"Provider configuration for subscription {self.subscription_id} is valid")


def parse_bool(value: Any, name: str = "value") -> bool:
    """
    Interpret a configuration value as a boolean.

    Raises:
        ConfigurationError: If the value is not a recognised boolean string
    """
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Could not interpret {name}={value!r} as a boolean")


def _coerce(values: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name: f.type for f in fields(ArmConfig)}
    out: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in known:
            logger.warning(f"Ignoring unknown provider setting '{key}'")
            continue
        if value is None:
            continue
        if known[key] in (bool, "bool"):
            out[key] = parse_bool(value, key)
        else:
            out[key] = str(value)
    return out


def load_config_file(path: str) -> Dict[str, Any]:
    """
    Read provider settings from a YAML file.

    The file may either hold the settings at the top level or nest them
    under a ``provider`` key.

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, "r") as file:
            data = yaml.safe_load(file) or {}
    except OSError as e:
        raise ConfigurationError(f"Could not read provider configuration file: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in provider configuration {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Provider configuration {path} must be a mapping")
    settings = data.get("provider", data)
    if not isinstance(settings, dict):
        raise ConfigurationError(f"'provider' section of {path} must be a mapping")
    logger.info(f"Loaded provider configuration from {path}")
    return settings


def load_config(
    path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> ArmConfig:
    """
    Build an ``ArmConfig`` from defaults, an optional file and the environment.

    Args:
        path: Optional YAML provider configuration file
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Merged configuration (not yet validated)
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    if path:
        values.update(_coerce(load_config_file(path)))

    from_env = {
        field_name: environ[var]
        for field_name, var in ENVIRONMENT_VARIABLES.items()
        if var in environ
    }
    values.update(_coerce(from_env))

    config = ArmConfig(**values)
    config.environment = config.environment.lower()
    return config
