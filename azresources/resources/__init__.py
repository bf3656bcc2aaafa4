"""Resource and data source definitions.

Each module exposes a factory returning a ``Resource``; the maps below are
what the provider registry is built from.
"""

from .availability_set import data_source_availability_set
from .data_lake_analytics_account import resource_data_lake_analytics_account
from .dev_test_virtual_network import resource_dev_test_virtual_network

RESOURCE_FACTORIES = {
    "azurerm_data_lake_analytics_account": resource_data_lake_analytics_account,
    "azurerm_dev_test_virtual_network": resource_dev_test_virtual_network,
}

DATA_SOURCE_FACTORIES = {
    "azurerm_availability_set": data_source_availability_set,
}

__all__ = [
    "DATA_SOURCE_FACTORIES",
    "RESOURCE_FACTORIES",
    "data_source_availability_set",
    "resource_data_lake_analytics_account",
    "resource_dev_test_virtual_network",
]
