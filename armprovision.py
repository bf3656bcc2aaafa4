#!/usr/bin/env python
import json
import logging
import sys

import click

import azresources.fileparser as fileparser
import azresources.lifecycle as lifecycle
import azresources.state as statefile
from azresources import __version__
from azresources.config_loader import load_config
from azresources.exceptions import ProviderError, ResourceValidationError
from azresources.provider_runtime import KIND_DATA_SOURCE, KIND_RESOURCE, default_provider

DEFAULT_STATE_FILE = "armprovision.state.json"


def my_excepthook(exc_type, exc_value, exc_traceback):
    print(f"Unhandled error: {exc_type}, {exc_value}, {exc_traceback}")


def _setup(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )
    if not debug:
        sys.excepthook = my_excepthook


def _fail(error: Exception, debug: bool) -> None:
    if debug:
        raise error
    click.echo(click.style(f"\nERROR: {error}\n", fg="red", bold=True), err=True)
    sys.exit(1)


def _configure(provider, config_file: str):
    return provider.configure(load_config(config_file or None))


def _select(addresses, address: str) -> list:
    if not address:
        return sorted(addresses)
    if address not in addresses:
        raise ProviderError(f"Address {address} not found")
    return [address]


def _print_state(title: str, state: dict) -> None:
    click.echo(click.style(f"\n{title}:\n", fg="white", bold=True))
    click.echo(json.dumps(state, indent=4, sort_keys=True, default=str))


def _shared_options(func):
    func = click.option(
        "--debug", is_flag=True, default=False, help="Debug logging and exception tracebacks"
    )(func)
    func = click.option(
        "--config", "config_file", default="", help="Provider configuration file (YAML)"
    )(func)
    return func


@click.version_option(version=__version__, prog_name="armprovision")
@click.group()
def cli():
    """
    armprovision manages Azure resources declared in HCL, JSON or YAML files

    For help with a specific command type:

    armprovision [COMMAND] --help

    """
    pass


@cli.command()
@click.option("--debug", is_flag=True, default=False, help="Debug logging")
@click.argument("type_name", required=False)
def schema(debug, type_name):
    """Print resource schemas as JSON"""
    _setup(debug)
    provider = default_provider()
    schemas = provider.schemas()
    if type_name:
        for kind in ("resources", "data_sources"):
            if type_name in schemas[kind]:
                click.echo(json.dumps(schemas[kind][type_name], indent=4, sort_keys=True))
                return
        click.echo(click.style(f"ERROR: Unknown type {type_name}", fg="red", bold=True), err=True)
        sys.exit(1)
    click.echo(json.dumps(schemas, indent=4, sort_keys=True))


@cli.command()
@click.option("--debug", is_flag=True, default=False, help="Dump exception tracebacks")
@click.option("--source", default=".", help="Configuration file or folder")
def validate(debug, source):
    """Validate configuration against resource schemas"""
    _setup(debug)
    provider = default_provider()
    failures = 0
    try:
        config = fileparser.read_config(source)
        for kind, section in ((KIND_RESOURCE, "resource"), (KIND_DATA_SOURCE, "data")):
            for address, attrs in sorted(config[section].items()):
                type_name, _ = fileparser.split_address(address)
                try:
                    lifecycle.prepare_config(provider.get(kind, type_name), attrs, address)
                    click.echo(f"  {section} {address}: OK")
                except ResourceValidationError as e:
                    failures += 1
                    click.echo(click.style(f"  {section} {address}: {e}", fg="red"))
    except ProviderError as e:
        _fail(e, debug)
    if failures:
        click.echo(click.style(f"\n{failures} invalid block(s)", fg="red", bold=True))
        sys.exit(1)
    click.echo("\nConfiguration is valid")


@cli.command()
@_shared_options
@click.option("--source", default=".", help="Configuration file or folder")
@click.option("--state", "state_file", default=DEFAULT_STATE_FILE, help="State file")
@click.option("--address", default="", help="Only apply this resource address")
def apply(debug, config_file, source, state_file, address):
    """Create or update declared resources"""
    _setup(debug)
    provider = default_provider()
    try:
        config = fileparser.read_config(source)
        doc = statefile.load_state(state_file)
        meta = _configure(provider, config_file)
        for addr in _select(config["resource"], address):
            type_name, _ = fileparser.split_address(addr)
            resource = provider.resource(type_name)
            prior = statefile.get_resource(doc, addr)
            if prior is None:
                click.echo(f"  {addr}: creating..")
                new_state = lifecycle.create(resource, config["resource"][addr], meta, addr)
            else:
                click.echo(f"  {addr}: updating {prior['id']}..")
                new_state = lifecycle.update(
                    resource, config["resource"][addr], prior, meta, addr
                )
            statefile.put_resource(doc, addr, new_state)
            statefile.save_state(state_file, doc)
            click.echo(click.style(f"  {addr}: {new_state['id'] or 'gone'}", fg="green"))
    except ProviderError as e:
        _fail(e, debug)
    click.echo("\nCompleted!")


@cli.command()
@_shared_options
@click.option("--state", "state_file", default=DEFAULT_STATE_FILE, help="State file")
def refresh(debug, config_file, state_file):
    """Read every resource in state back from Azure"""
    _setup(debug)
    provider = default_provider()
    try:
        doc = statefile.load_state(state_file)
        meta = _configure(provider, config_file)
        for addr in sorted(doc["resources"]):
            type_name, _ = fileparser.split_address(addr)
            prior = statefile.get_resource(doc, addr)
            new_state = lifecycle.read(provider.resource(type_name), prior, meta, addr)
            if not new_state["id"]:
                click.echo(
                    click.style(f"  {addr}: no longer exists, removing from state", fg="yellow")
                )
            statefile.put_resource(doc, addr, new_state)
        statefile.save_state(state_file, doc)
    except ProviderError as e:
        _fail(e, debug)
    click.echo("\nCompleted!")


@cli.command()
@_shared_options
@click.option("--state", "state_file", default=DEFAULT_STATE_FILE, help="State file")
@click.option("--address", default="", help="Only destroy this resource address")
def destroy(debug, config_file, state_file, address):
    """Delete resources recorded in state"""
    _setup(debug)
    provider = default_provider()
    try:
        doc = statefile.load_state(state_file)
        meta = _configure(provider, config_file)
        for addr in _select(doc["resources"], address):
            type_name, _ = fileparser.split_address(addr)
            prior = statefile.get_resource(doc, addr)
            click.echo(f"  {addr}: destroying {prior['id']}..")
            lifecycle.delete(provider.resource(type_name), prior, meta, addr)
            statefile.remove_resource(doc, addr)
            statefile.save_state(state_file, doc)
    except ProviderError as e:
        _fail(e, debug)
    click.echo("\nCompleted!")


@cli.command(name="import")
@_shared_options
@click.option("--state", "state_file", default=DEFAULT_STATE_FILE, help="State file")
@click.argument("address")
@click.argument("resource_id")
def import_command(debug, config_file, state_file, address, resource_id):
    """Adopt an existing Azure resource into state"""
    _setup(debug)
    provider = default_provider()
    try:
        type_name, _ = fileparser.split_address(address)
        resource = provider.resource(type_name)
        doc = statefile.load_state(state_file)
        if statefile.get_resource(doc, address) is not None:
            raise ProviderError(f"{address} is already managed in {state_file}")
        meta = _configure(provider, config_file)
        new_state = lifecycle.import_resource(resource, resource_id, meta, address)
        statefile.put_resource(doc, address, new_state)
        statefile.save_state(state_file, doc)
        _print_state(f"Imported {address}", new_state)
    except ProviderError as e:
        _fail(e, debug)


@cli.command(name="read-data")
@_shared_options
@click.option("--source", default=".", help="Configuration file or folder")
@click.option("--address", default="", help="Only read this data source address")
def read_data(debug, config_file, source, address):
    """Look up data sources and print their attributes as JSON"""
    _setup(debug)
    provider = default_provider()
    results = {}
    try:
        config = fileparser.read_config(source)
        meta = _configure(provider, config_file)
        for addr in _select(config["data"], address):
            type_name, _ = fileparser.split_address(addr)
            results[addr] = lifecycle.read_data_source(
                provider.data_source(type_name), config["data"][addr], meta, addr
            )
    except ProviderError as e:
        _fail(e, debug)
    click.echo(json.dumps(results, indent=4, sort_keys=True, default=str))


if __name__ == "__main__":
    cli()
