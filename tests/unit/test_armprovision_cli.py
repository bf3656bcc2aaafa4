"""Unit tests for armprovision.py CLI commands."""

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

# Add project root and fixtures to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "fixtures"))

from azure_fakes import (
    AVAILABILITY_SET_ID,
    VNET_ID,
    availability_set,
    dev_test_vnet,
    make_meta,
    not_found,
    poller,
)

import armprovision

VNET_CONFIG = {
    "resource": {
        "azurerm_dev_test_virtual_network": {
            "example": {
                "name": "net1",
                "lab_name": "lab1",
                "resource_group_name": "rg1",
                "description": "lab network",
            }
        }
    },
    "data": {
        "azurerm_availability_set": {
            "existing": {"name": "as1", "resource_group_name": "rg1"}
        }
    },
}


def _fake_meta():
    meta = make_meta()
    vnets = meta.devtestlabs.virtual_networks
    vnets.begin_create_or_update.return_value = poller()
    vnets.begin_delete.return_value = poller()
    vnets.get.return_value = dev_test_vnet()
    meta.compute.availability_sets.get.return_value = availability_set()
    return meta


def _write_config(config=None):
    with open("main.tf.json", "w") as f:
        json.dump(config or VNET_CONFIG, f)


class TestSchemaCommand(unittest.TestCase):
    """Test the schema command."""

    def test_all_schemas(self):
        result = CliRunner().invoke(armprovision.cli, ["schema"])
        self.assertEqual(result.exit_code, 0)
        schemas = json.loads(result.output)
        self.assertIn("azurerm_dev_test_virtual_network", schemas["resources"])
        self.assertIn("azurerm_data_lake_analytics_account", schemas["resources"])
        self.assertIn("azurerm_availability_set", schemas["data_sources"])

    def test_single_schema(self):
        result = CliRunner().invoke(armprovision.cli, ["schema", "azurerm_availability_set"])
        self.assertEqual(result.exit_code, 0)
        schema = json.loads(result.output)
        self.assertEqual(schema["managed"], {"computed": True, "type": "bool"})

    def test_debug_flag(self):
        result = CliRunner().invoke(
            armprovision.cli, ["schema", "--debug", "azurerm_dev_test_virtual_network"]
        )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("unique_identifier", result.output)

    def test_unknown_type(self):
        result = CliRunner().invoke(armprovision.cli, ["schema", "azurerm_nothing"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown type azurerm_nothing", result.output)


class TestValidateCommand(unittest.TestCase):
    """Test the validate command."""

    def test_valid_configuration(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_config()
            result = runner.invoke(armprovision.cli, ["validate", "--source", "main.tf.json"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("azurerm_dev_test_virtual_network.example: OK", result.output)
        self.assertIn("Configuration is valid", result.output)

    def test_invalid_configuration(self):
        config = {
            "resource": {
                "azurerm_data_lake_analytics_account": {"bad": {"name": "analytics1"}}
            }
        }
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_config(config)
            result = runner.invoke(armprovision.cli, ["validate", "--source", "main.tf.json"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("location: required field is not set", result.output)
        self.assertIn("1 invalid block(s)", result.output)

    def test_unknown_type_fails(self):
        config = {"resource": {"azurerm_nothing": {"x": {}}}}
        runner = CliRunner()
        with runner.isolated_filesystem():
            _write_config(config)
            result = runner.invoke(armprovision.cli, ["validate", "--source", "main.tf.json"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown resource type 'azurerm_nothing'", result.output)


class TestLifecycleCommands(unittest.TestCase):
    """Test apply, refresh, import and destroy against fake clients."""

    def setUp(self):
        self.meta = _fake_meta()
        patcher = patch("armprovision._configure", return_value=self.meta)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.runner = CliRunner()

    def _state(self):
        with open("state.json") as f:
            return json.load(f)

    def test_apply_creates_then_updates(self):
        with self.runner.isolated_filesystem():
            _write_config()
            result = self.runner.invoke(
                armprovision.cli, ["apply", "--source", "main.tf.json", "--state", "state.json"]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            state = self._state()
            entry = state["resources"]["azurerm_dev_test_virtual_network.example"]
            self.assertEqual(entry["id"], VNET_ID)
            self.assertEqual(entry["attributes"]["lab_name"], "lab1")

            result = self.runner.invoke(
                armprovision.cli, ["apply", "--source", "main.tf.json", "--state", "state.json"]
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn(f"updating {VNET_ID}", result.output)

    def test_refresh_drops_missing_resources(self):
        with self.runner.isolated_filesystem():
            _write_config()
            self.runner.invoke(
                armprovision.cli, ["apply", "--source", "main.tf.json", "--state", "state.json"]
            )
            self.meta.devtestlabs.virtual_networks.get.side_effect = not_found()

            result = self.runner.invoke(armprovision.cli, ["refresh", "--state", "state.json"])

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("no longer exists", result.output)
            self.assertEqual(self._state()["resources"], {})

    def test_import_and_destroy(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                armprovision.cli,
                ["import", "azurerm_dev_test_virtual_network.example", VNET_ID, "--state", "state.json"],
            )
            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("azurerm_dev_test_virtual_network.example", self._state()["resources"])

            result = self.runner.invoke(armprovision.cli, ["destroy", "--state", "state.json"])
            self.assertEqual(result.exit_code, 0, result.output)
            self.meta.devtestlabs.virtual_networks.begin_delete.assert_called_once_with(
                "rg1", "lab1", "net1"
            )
            self.assertEqual(self._state()["resources"], {})

    def test_import_already_managed(self):
        with self.runner.isolated_filesystem():
            args = ["import", "azurerm_dev_test_virtual_network.example", VNET_ID, "--state", "state.json"]
            self.runner.invoke(armprovision.cli, args)
            result = self.runner.invoke(armprovision.cli, args)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("already managed", result.output)

    def test_import_data_source_type_rejected(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                armprovision.cli,
                ["import", "azurerm_availability_set.x", AVAILABILITY_SET_ID, "--state", "state.json"],
            )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("Unknown resource type", result.output)

    def test_destroy_unknown_address(self):
        with self.runner.isolated_filesystem():
            result = self.runner.invoke(
                armprovision.cli,
                ["destroy", "--state", "state.json", "--address", "azurerm_dev_test_virtual_network.x"],
            )
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not found", result.output)

    def test_read_data(self):
        with self.runner.isolated_filesystem():
            _write_config()
            result = self.runner.invoke(
                armprovision.cli, ["read-data", "--source", "main.tf.json"]
            )
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn(AVAILABILITY_SET_ID, result.output)
        self.assertIn('"platform_fault_domain_count": "3"', result.output)


if __name__ == "__main__":
    unittest.main()
