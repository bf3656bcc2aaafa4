"""Azure SDK client container handed to every resource function.

``ArmClient`` plays the part of the provider "meta" object: resources reach
the management client they need through it (``meta.compute``,
``meta.devtestlabs``, ``meta.datalake_analytics``) and read provider-wide
settings such as the subscription ID.
"""

import logging
from typing import Any, Optional

from azresources.config_loader import ArmConfig

logger = logging.getLogger(__name__)


def build_credential(config: ArmConfig) -> Any:
    """Create an azure-identity credential for the configuration."""
    from azure.identity import ClientSecretCredential, DefaultAzureCredential

    if config.use_service_principal():
        logger.info(f"Authenticating with service principal {config.client_id}")
        return ClientSecretCredential(
            tenant_id=config.tenant_id,
            client_id=config.client_id,
            client_secret=config.client_secret,
            authority=config.authority_host,
        )
    logger.info("Authenticating with DefaultAzureCredential")
    return DefaultAzureCredential(authority=config.authority_host)


class ArmClient:
    """Lazily constructed Azure management clients for one subscription.

    Any client may be passed in directly, which is how tests supply fakes.
    """

    def __init__(
        self,
        config: ArmConfig,
        credential: Optional[Any] = None,
        compute: Optional[Any] = None,
        devtestlabs: Optional[Any] = None,
        datalake_analytics: Optional[Any] = None,
    ):
        self.config = config
        self._credential = credential
        self._compute = compute
        self._devtestlabs = devtestlabs
        self._datalake_analytics = datalake_analytics

    @classmethod
    def from_config(cls, config: ArmConfig) -> "ArmClient":
        config.validate()
        return cls(config)

    @property
    def subscription_id(self) -> str:
        return self.config.subscription_id

    @property
    def require_resources_to_be_imported(self) -> bool:
        return self.config.require_resources_to_be_imported

    @property
    def credential(self) -> Any:
        if self._credential is None:
            self._credential = build_credential(self.config)
        return self._credential

    def _client_kwargs(self) -> dict:
        endpoint = self.config.resource_manager_endpoint
        return {
            "base_url": endpoint,
            "credential_scopes": [endpoint + "/.default"],
        }

    @property
    def compute(self) -> Any:
        if self._compute is None:
            from azure.mgmt.compute import ComputeManagementClient

            self._compute = ComputeManagementClient(
                self.credential, self.subscription_id, **self._client_kwargs()
            )
        return self._compute

    @property
    def devtestlabs(self) -> Any:
        if self._devtestlabs is None:
            from azure.mgmt.devtestlabs import DevTestLabsClient

            self._devtestlabs = DevTestLabsClient(
                self.credential, self.subscription_id, **self._client_kwargs()
            )
        return self._devtestlabs

    @property
    def datalake_analytics(self) -> Any:
        if self._datalake_analytics is None:
            from azure.mgmt.datalake.analytics import (
                DataLakeAnalyticsAccountManagementClient,
            )

            self._datalake_analytics = DataLakeAnalyticsAccountManagementClient(
                self.credential, self.subscription_id, **self._client_kwargs()
            )
        return self._datalake_analytics
