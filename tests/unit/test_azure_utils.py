"""Unit tests for azresources/utils/azure_utils.py"""

import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from azresources.exceptions import ResourceIdError
from azresources.utils.azure_utils import (
    ResourceID,
    normalize_location,
    parse_azure_resource_id,
    suppress_location_diff,
    validate_resource_group_name,
)


class TestParseAzureResourceId(unittest.TestCase):
    """Test parse_azure_resource_id() splitting of ARM IDs."""

    def test_nested_resource(self):
        result = parse_azure_resource_id(
            "/subscriptions/sub1/resourceGroups/rg1/providers/Microsoft.DevTestLab"
            "/labs/lab1/virtualnetworks/net1"
        )
        self.assertEqual(result.subscription_id, "sub1")
        self.assertEqual(result.resource_group, "rg1")
        self.assertEqual(result.provider, "Microsoft.DevTestLab")
        self.assertEqual(result.path, {"labs": "lab1", "virtualnetworks": "net1"})

    def test_resource_group_only(self):
        result = parse_azure_resource_id("/subscriptions/sub1/resourceGroups/rg1")
        self.assertEqual(result.resource_group, "rg1")
        self.assertEqual(result.provider, "")
        self.assertEqual(result.path, {})

    def test_lower_case_resource_groups_segment(self):
        result = parse_azure_resource_id(
            "/subscriptions/sub1/resourcegroups/rg1/providers/Microsoft.Compute/availabilitySets/as1"
        )
        self.assertEqual(result.resource_group, "rg1")
        self.assertEqual(result.path, {"availabilitySets": "as1"})

    def test_trailing_slash_and_query_ignored(self):
        result = parse_azure_resource_id(
            "/subscriptions/sub1/resourceGroups/rg1/providers/Microsoft.Foo/bars/b1/?api-version=1"
        )
        self.assertEqual(result.path, {"bars": "b1"})

    def test_second_subscriptions_segment_kept_in_path(self):
        result = parse_azure_resource_id(
            "/subscriptions/sub1/resourceGroups/rg1/providers/Microsoft.ServiceBus"
            "/namespaces/ns1/topics/t1/subscriptions/sub2"
        )
        self.assertEqual(result.subscription_id, "sub1")
        self.assertEqual(result.path["subscriptions"], "sub2")

    def test_invalid_ids(self):
        invalid = [
            "subscriptions/sub1/resourceGroups/rg1",
            "/subscriptions/sub1/resourceGroups",
            "/resourceGroups/rg1",
            "/subscriptions/sub1/providers/Microsoft.Foo/bars/b1",
            "/subscriptions//resourceGroups/rg1",
            "",
        ]
        for resource_id in invalid:
            with self.subTest(resource_id=resource_id):
                with self.assertRaises(ResourceIdError):
                    parse_azure_resource_id(resource_id)

    def test_path_value_falls_back_to_case_insensitive(self):
        resource_id = ResourceID("sub1", "rg1", path={"virtualNetworks": "net1"})
        self.assertEqual(resource_id.path_value("virtualNetworks"), "net1")
        self.assertEqual(resource_id.path_value("virtualnetworks"), "net1")
        self.assertIsNone(resource_id.path_value("labs"))


class TestLocation(unittest.TestCase):
    """Test location normalization and diff suppression."""

    def test_normalize_location(self):
        self.assertEqual(normalize_location("West Europe"), "westeurope")
        self.assertEqual(normalize_location("eastus2"), "eastus2")

    def test_suppress_location_diff(self):
        self.assertTrue(suppress_location_diff("location", "westeurope", "West Europe"))
        self.assertFalse(suppress_location_diff("location", "westeurope", "North Europe"))


class TestResourceGroupName(unittest.TestCase):
    """Test validate_resource_group_name()."""

    def test_valid(self):
        for name in ["rg1", "my-rg_(test).1", "a" * 90]:
            with self.subTest(name=name):
                _, errors = validate_resource_group_name(name, "resource_group_name")
                self.assertEqual(errors, [])

    def test_invalid(self):
        for name in ["rg.", "a" * 91, "rg!", "", "rg/1"]:
            with self.subTest(name=name):
                _, errors = validate_resource_group_name(name, "resource_group_name")
                self.assertTrue(errors)

    def test_period_message(self):
        _, errors = validate_resource_group_name("rg.", "resource_group_name")
        self.assertEqual(errors, ['"resource_group_name" may not end with a period'])


if __name__ == "__main__":
    unittest.main()
