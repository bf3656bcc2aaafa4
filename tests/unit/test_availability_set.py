"""Unit tests for azresources/resources/availability_set.py"""

import unittest
import sys
from pathlib import Path

# Add project root and fixtures to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "fixtures"))

from azure_fakes import AVAILABILITY_SET_ID, availability_set, http_error, make_meta, not_found

from azresources import lifecycle
from azresources.exceptions import ResourceOperationError, ResourceValidationError
from azresources.resources.availability_set import data_source_availability_set

CONFIG = {"name": "as1", "resource_group_name": "rg1"}


class TestAvailabilitySetDataSource(unittest.TestCase):
    """Test read_availability_set() through the data source lifecycle."""

    def setUp(self):
        self.data_source = data_source_availability_set()
        self.meta = make_meta()
        self.client = self.meta.compute.availability_sets

    def test_aligned_set(self):
        self.client.get.return_value = availability_set(tags={"env": "prod"})

        state = lifecycle.read_data_source(self.data_source, CONFIG, self.meta)

        self.client.get.assert_called_once_with("rg1", "as1")
        self.assertEqual(state["id"], AVAILABILITY_SET_ID)
        self.assertEqual(state["location"], "eastus")
        self.assertEqual(state["platform_update_domain_count"], "5")
        self.assertEqual(state["platform_fault_domain_count"], "3")
        self.assertTrue(state["managed"])
        self.assertEqual(state["tags"], {"env": "prod"})

    def test_classic_set_is_not_managed(self):
        self.client.get.return_value = availability_set(sku_name="Classic")
        state = lifecycle.read_data_source(self.data_source, CONFIG, self.meta)
        self.assertFalse(state["managed"])
        self.assertEqual(state["tags"], {})

    def test_missing_sku(self):
        self.client.get.return_value = availability_set(sku_name=None)
        state = lifecycle.read_data_source(self.data_source, CONFIG, self.meta)
        self.assertFalse(state["managed"])

    def test_not_found_is_an_error(self):
        self.client.get.side_effect = not_found()

        with self.assertRaises(ResourceOperationError) as ctx:
            lifecycle.read_data_source(self.data_source, CONFIG, self.meta)
        self.assertEqual(
            ctx.exception.message,
            "Error: Availability Set 'as1' (Resource Group 'rg1') was not found",
        )

    def test_other_error(self):
        self.client.get.side_effect = http_error(500)

        with self.assertRaises(ResourceOperationError) as ctx:
            lifecycle.read_data_source(self.data_source, CONFIG, self.meta)
        self.assertIn("Error making Read request on Availability Set 'as1'", str(ctx.exception))

    def test_computed_attributes_cannot_be_configured(self):
        with self.assertRaises(ResourceValidationError) as ctx:
            lifecycle.read_data_source(self.data_source, {**CONFIG, "managed": True}, self.meta)
        self.assertIn("managed: computed attributes cannot be set", ctx.exception.errors)

    def test_empty_name_rejected(self):
        with self.assertRaises(ResourceValidationError):
            lifecycle.read_data_source(self.data_source, {**CONFIG, "name": ""}, self.meta)


if __name__ == "__main__":
    unittest.main()
