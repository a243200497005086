"""gmailfilter CLI - manage Gmail filters and labels from JSON config and state files."""

import json
import logging
import os
import sys
from functools import wraps

import click
from click_option_group import optgroup, RequiredMutuallyExclusiveOptionGroup
from dotenv import load_dotenv

from gmailfilter import __version__
from gmailfilter.exceptions import GmailFilterError
from gmailfilter.framework import UNKNOWN, Diagnostics, ProviderServer, StateResult
from gmailfilter.provider import new

from .config_commands import config_group as config_module


# Configure logging at the application level
if not logging.root.handlers:
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=getattr(logging, LOG_LEVEL),
                        format='%(asctime)s - %(levelname)s - %(message)s')
# Suppress noisy INFO logs from googleapiclient
logging.getLogger('googleapiclient.discovery').setLevel(logging.WARNING)
logging.getLogger('googleapiclient.discovery_cache').setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def build_server(configure: bool = True) -> ProviderServer:
    """Create the provider host, configuring the Gmail service unless told not to."""
    server = ProviderServer(new(__version__))
    if configure:
        _exit_on_error(server.configure_provider())
    return server


def _to_json(value) -> str:
    return json.dumps(value, indent=2, default=lambda v: "(known after apply)" if v is UNKNOWN else str(v))


def _report(diags: Diagnostics):
    for diag in diags:
        click.secho(str(diag), fg="red" if diag.severity == "error" else "yellow", err=True)


def _exit_on_error(diags: Diagnostics):
    _report(diags)
    if diags.has_error():
        sys.exit(1)


def _load_config(config_file, config_json) -> dict:
    if config_file:
        with open(config_file) as f:
            return json.load(f)
    return json.loads(config_json)


def _state_document(result: StateResult) -> dict:
    return {"schema_version": result.schema_version, "attributes": result.state}


def _read_state(server: ProviderServer, type_name: str, state_file: str) -> dict:
    """Load a state document, upgrading it to the current schema version if needed."""
    with open(state_file) as f:
        document = json.load(f)
    version = document.get("schema_version", 0)
    result = server.upgrade_resource_state(type_name, document.get("attributes"), version)
    _exit_on_error(result.diagnostics)
    return result.state


def handle_errors(f):
    """Turn gmailfilter and input errors into a message and exit code 1."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (GmailFilterError, OSError, ValueError) as e:
            logger.debug("Command failed", exc_info=True)
            click.secho(f"Error: {e}", fg="red", err=True)
            sys.exit(1)
    return decorated_function


def config_options(f):
    """Mutually exclusive --config/--config-json options."""
    f = optgroup.option('--config-json', help='Configuration as an inline JSON object.')(f)
    f = optgroup.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
                        help='Path to a JSON file holding the configuration.')(f)
    f = optgroup.group('Configuration source', cls=RequiredMutuallyExclusiveOptionGroup)(f)
    return f


@click.group()
@click.version_option(__version__, prog_name='gmailfilter')
@click.option('--debug', is_flag=True, help='Enable debug logging.')
def gmailfilter(debug):
    """Gmail filter provider CLI.

    Plans and applies Gmail filters and labels declared as JSON, reading and
    writing state documents of the form {"schema_version": N, "attributes": {...}}.
    """
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@click.command()
@click.argument('type_name', required=False)
@click.option('--data-source', is_flag=True, help='Show the data source schema for TYPE_NAME instead of the resource.')
@handle_errors
def schema(type_name, data_source):
    """Print the provider schema, or the schema of one type, as JSON."""
    server = build_server(configure=False)
    if not type_name:
        click.echo(_to_json(server.get_provider_schema()))
    elif data_source:
        click.echo(_to_json(server.data_source_schema(type_name).to_dict()))
    else:
        click.echo(_to_json(server.resource_schema(type_name).to_dict()))


# Resource group
@click.group()
def resource():
    """Plan, apply, read, import and destroy resources."""
    pass


@resource.command('plan')
@click.argument('type_name')
@config_options
@click.option('--state', 'state_file', type=click.Path(exists=True, dir_okay=False),
              help='Current state document. Omit to plan a create.')
@handle_errors
def plan_command(type_name, config_file, config_json, state_file):
    """Show what applying the configuration would do."""
    server = build_server()
    prior = _read_state(server, type_name, state_file) if state_file else None
    plan = server.plan_resource_change(type_name, prior, _load_config(config_file, config_json))
    _exit_on_error(plan.diagnostics)
    click.echo(_to_json({
        "action": plan.action,
        "requires_replace": plan.requires_replace,
        "planned_state": plan.planned_state,
    }))


@resource.command('apply')
@click.argument('type_name')
@config_options
@click.option('--state', 'state_file', type=click.Path(exists=True, dir_okay=False),
              help='Current state document. Omit to create a new object.')
@handle_errors
def apply_command(type_name, config_file, config_json, state_file):
    """Create, update or replace a resource and print its new state."""
    server = build_server()
    config = _load_config(config_file, config_json)
    prior = _read_state(server, type_name, state_file) if state_file else None
    plan = server.plan_resource_change(type_name, prior, config)
    _exit_on_error(plan.diagnostics)
    logger.info(f"Plan for {type_name}: {plan.action}")
    result = server.apply_resource_change(type_name, plan, config)
    _exit_on_error(result.diagnostics)
    click.echo(_to_json(_state_document(result)))


@resource.command('read')
@click.argument('type_name')
@click.option('--state', 'state_file', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Current state document.')
@handle_errors
def read_command(type_name, state_file):
    """Refresh a resource's state from Gmail. Prints null if it no longer exists."""
    server = build_server()
    result = server.read_resource(type_name, _read_state(server, type_name, state_file))
    _exit_on_error(result.diagnostics)
    click.echo(_to_json(_state_document(result) if result.state is not None else None))


@resource.command('destroy')
@click.argument('type_name')
@click.option('--state', 'state_file', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Current state document.')
@handle_errors
def destroy_command(type_name, state_file):
    """Delete a resource. Succeeds if it is already gone."""
    server = build_server()
    prior = _read_state(server, type_name, state_file)
    if prior is None:
        click.echo("Nothing to destroy.")
        return
    plan = server.plan_resource_change(type_name, prior, None)
    result = server.apply_resource_change(type_name, plan)
    _exit_on_error(result.diagnostics)
    click.echo(f"Destroyed {type_name} {prior.get('id')}")


@resource.command('import')
@click.argument('type_name')
@click.argument('import_id')
@handle_errors
def import_command(type_name, import_id):
    """Import an existing filter or label by its Gmail ID."""
    server = build_server()
    result = server.import_resource_state(type_name, import_id)
    _exit_on_error(result.diagnostics)
    click.echo(_to_json(_state_document(result)))


@resource.command('upgrade')
@click.argument('type_name')
@click.option('--state', 'state_file', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Stored state document.')
@click.option('--from-version', type=int, default=None,
              help="Schema version of the stored state (defaults to the document's schema_version).")
@handle_errors
def upgrade_command(type_name, state_file, from_version):
    """Rewrite a stored state document in the current schema version."""
    server = build_server(configure=False)
    with open(state_file) as f:
        document = json.load(f)
    version = from_version if from_version is not None else document.get("schema_version", 0)
    result = server.upgrade_resource_state(type_name, document.get("attributes"), version)
    _exit_on_error(result.diagnostics)
    click.echo(_to_json(_state_document(result)))


@click.command()
@click.argument('type_name')
@config_options
@handle_errors
def data(type_name, config_file, config_json):
    """Read a data source and print its values."""
    server = build_server()
    result = server.read_data_source(type_name, _load_config(config_file, config_json))
    _exit_on_error(result.diagnostics)
    click.echo(_to_json(result.state))


# Add commands to groups using add_command()
gmailfilter.add_command(schema, name='schema')
gmailfilter.add_command(resource)
gmailfilter.add_command(data, name='data')
gmailfilter.add_command(config_module, name='config')


def main():
    """Entry point for the CLI."""
    load_dotenv()
    gmailfilter()


if __name__ == "__main__":
    main()
