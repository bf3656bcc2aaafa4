"""File parser module for armprovision.

This module reads resource configuration from HCL (``.tf``), JSON
(``.tf.json``/``.json``) or YAML (``.yaml``/``.yml``) files and extracts the
``resource`` and ``data`` blocks into a flat mapping keyed by address
(``"azurerm_dev_test_virtual_network.example"``).
"""

import json
import os
from typing import Any, Dict, List

import click
import hcl2
import yaml

from azresources.exceptions import ProviderError

# Sections to extract during parsing
EXTRACT: List[str] = ["resource", "data"]

# Metadata keys newer python-hcl2 releases add to every block
HCL_METADATA_KEYS = ("__start_line__", "__end_line__")


class ConfigurationParseError(ProviderError):
    """Raised when a configuration file cannot be read or parsed."""

    pass


def _unquote(value: Any) -> Any:
    if isinstance(value, str) and len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def clean_hcl_value(value: Any) -> Any:
    """Strip HCL parser artefacts: surrounding quotes and line metadata keys."""
    if isinstance(value, dict):
        return {
            _unquote(k): clean_hcl_value(v)
            for k, v in value.items()
            if k not in HCL_METADATA_KEYS
        }
    if isinstance(value, list):
        return [clean_hcl_value(v) for v in value]
    return _unquote(value)


def _load_file(filename: str) -> Dict[str, Any]:
    lower = filename.lower()
    with click.open_file(filename, "r", encoding="utf8") as f:
        if lower.endswith(".json"):
            return json.load(f)
        if lower.endswith((".yaml", ".yml")):
            return yaml.safe_load(f) or {}
        return clean_hcl_value(hcl2.load(f))


def _iter_blocks(section: Any):
    """Yield ``(type, name, body)`` from a parsed section.

    HCL parses a section into a list of ``{type: {name: body}}`` dicts while
    JSON and YAML files usually hold a single ``{type: {name: body}}`` dict.
    """
    entries = section if isinstance(section, list) else [section]
    for entry in entries:
        if not isinstance(entry, dict):
            raise ConfigurationParseError(f"Unexpected block structure: {entry!r}")
        for type_name, named in entry.items():
            if not isinstance(named, dict):
                raise ConfigurationParseError(
                    f"Block {type_name!r} must contain named bodies"
                )
            for name, body in named.items():
                if isinstance(body, list):
                    # JSON syntax allows a list of bodies per label
                    body = body[0] if body else {}
                yield type_name, name, body or {}


def parse_config_data(parsed: Dict[str, Any], source: str = "") -> Dict[str, Dict[str, Any]]:
    """Extract resource and data blocks from an already parsed document.

    Returns:
        ``{"resource": {address: attrs}, "data": {address: attrs}}``

    Raises:
        ConfigurationParseError: If an address is declared twice
    """
    result: Dict[str, Dict[str, Any]] = {section: {} for section in EXTRACT}
    for section in EXTRACT:
        if section not in parsed:
            continue
        for type_name, name, body in _iter_blocks(parsed[section]):
            address = f"{type_name}.{name}"
            if address in result[section]:
                raise ConfigurationParseError(
                    f"Duplicate {section} block {address}",
                    context={"source": source},
                )
            result[section][address] = dict(body)
    return result


def read_config(source: str) -> Dict[str, Dict[str, Any]]:
    """Read a configuration file, or every supported file in a directory.

    Args:
        source: File path or directory

    Returns:
        ``{"resource": {address: attrs}, "data": {address: attrs}}``
    """
    if os.path.isdir(source):
        filenames = sorted(
            os.path.join(source, f)
            for f in os.listdir(source)
            if f.lower().endswith((".tf", ".json", ".yaml", ".yml"))
        )
    else:
        filenames = [source]

    merged: Dict[str, Dict[str, Any]] = {section: {} for section in EXTRACT}
    for filename in filenames:
        try:
            parsed = _load_file(filename)
        except OSError as e:
            raise ConfigurationParseError(f"Could not read {filename}: {e}") from e
        except Exception as e:
            # hcl2 raises lark exceptions that share no common base we can name
            raise ConfigurationParseError(
                f"A configuration parsing error occurred in {filename}: {e}"
            ) from e
        if not isinstance(parsed, dict):
            raise ConfigurationParseError(f"{filename} does not contain a mapping")

        sections = parse_config_data(parsed, filename)
        for section in EXTRACT:
            for address, attrs in sections[section].items():
                if address in merged[section]:
                    raise ConfigurationParseError(
                        f"Duplicate {section} block {address}",
                        context={"source": filename},
                    )
                merged[section][address] = attrs
        click.echo(
            click.style(
                f"  Parsed {filename}: {len(sections['resource'])} resource(s), "
                f"{len(sections['data'])} data source(s)",
                fg="green",
            ),
            err=True,
        )
    return merged


def split_address(address: str):
    """Split ``type.name`` into its parts.

    Raises:
        ConfigurationParseError: If the address has no name part
    """
    type_name, sep, name = address.partition(".")
    if not sep or not type_name or not name:
        raise ConfigurationParseError(f"Invalid resource address {address!r}")
    return type_name, name
