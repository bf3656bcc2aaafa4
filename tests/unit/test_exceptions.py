"""Unit tests for custom exception types."""

import unittest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from azresources.exceptions import (
    ConfigurationError,
    ImportAsExistsError,
    ProviderError,
    ResourceIdError,
    ResourceOperationError,
    ResourceValidationError,
    UnknownResourceTypeError,
)


class TestProviderError(unittest.TestCase):
    """Test base ProviderError exception class."""

    def test_basic_error_message(self):
        """Test error with message only."""
        error = ProviderError("Test error message")
        self.assertEqual(error.message, "Test error message")
        self.assertEqual(error.context, {})
        self.assertEqual(str(error), "Test error message")

    def test_error_with_context(self):
        """Test error with contextual information."""
        context = {"address": "azurerm_dev_test_virtual_network.example", "attempt": 2}
        error = ProviderError("Operation failed", context=context)

        self.assertEqual(error.context, context)
        self.assertIn("address=azurerm_dev_test_virtual_network.example", str(error))
        self.assertIn("attempt=2", str(error))

    def test_error_inheritance(self):
        """Test that ProviderError inherits from Exception."""
        self.assertIsInstance(ProviderError("Test"), Exception)


class TestResourceValidationError(unittest.TestCase):
    """Test ResourceValidationError exception class."""

    def test_errors_listed(self):
        error = ResourceValidationError(
            "Invalid configuration",
            errors=["name: required field is not set", "tier: unsupported argument"],
        )
        self.assertIsInstance(error, ProviderError)
        self.assertEqual(len(error.errors), 2)
        self.assertIn("\n  - name: required field is not set", str(error))
        self.assertIn("\n  - tier: unsupported argument", str(error))

    def test_no_errors(self):
        error = ResourceValidationError("Invalid configuration")
        self.assertEqual(error.errors, [])
        self.assertEqual(str(error), "Invalid configuration")


class TestImportAsExistsError(unittest.TestCase):
    """Test ImportAsExistsError exception class."""

    def test_message_names_the_id(self):
        error = ImportAsExistsError(
            "azurerm_data_lake_analytics_account", "/subscriptions/s/resourceGroups/rg"
        )
        self.assertEqual(error.resource_type, "azurerm_data_lake_analytics_account")
        self.assertEqual(error.resource_id, "/subscriptions/s/resourceGroups/rg")
        self.assertIn("already exists", str(error))
        self.assertIn("needs to be imported into the State", str(error))
        self.assertIn("/subscriptions/s/resourceGroups/rg", str(error))


class TestExceptionHierarchy(unittest.TestCase):
    """Test that every error can be caught as ProviderError."""

    def test_subclasses(self):
        for cls in (
            ResourceIdError,
            UnknownResourceTypeError,
            ResourceOperationError,
            ConfigurationError,
        ):
            with self.subTest(cls=cls.__name__):
                with self.assertRaises(ProviderError):
                    raise cls("failure", context={"kind": "test"})

    def test_cause_is_chained(self):
        try:
            try:
                raise RuntimeError("sdk failure")
            except RuntimeError as e:
                raise ResourceOperationError("Error deleting thing") from e
        except ResourceOperationError as error:
            self.assertIsInstance(error.__cause__, RuntimeError)


if __name__ == "__main__":
    unittest.main()
