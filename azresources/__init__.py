"""Azure Resource Manager resource definitions for armprovision."""

__version__ = "0.3"
