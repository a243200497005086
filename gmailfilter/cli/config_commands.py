import click
import yaml

from gmailfilter import config
from gmailfilter.auth import SCOPE_ALIASES

# Define the schema of allowed configuration keys
ALLOWED_CONFIG = {
    "gmail.user_id": {
        "type": str,
    },
    "gmail.scopes": {
        "type": list,
    },
}

@click.group()
def config_group():
    """Commands for managing gmailfilter configuration."""
    pass

@config_group.command('view')
def view_config():
    """Displays the current gmailfilter configuration."""
    config_data = config.load_config()
    click.echo(yaml.dump(config_data, default_flow_style=False))

@config_group.command('set')
@click.argument('key')
@click.argument('value')
def set_config(key, value):
    """
    Sets a configuration value for a supported key.

    \b
    Supported Keys:
      - gmail.user_id: Mailbox to manage (default 'me').
      - gmail.scopes:  Comma-separated scope URLs or aliases
                       (settings, labels, modify).

    \b
    Examples:
      gmailfilter config set gmail.user_id me
      gmailfilter config set gmail.scopes settings,labels
    """
    if key not in ALLOWED_CONFIG:
        raise click.UsageError(f"Configuration key '{key}' is not supported.")

    if ALLOWED_CONFIG[key]["type"] is list:
        value = [v.strip() for v in value.split(',') if v.strip()]
        unknown = [v for v in value if v not in SCOPE_ALIASES and not v.startswith("https://")]
        if unknown:
            raise click.UsageError(f"Invalid scope(s) for '{key}': {', '.join(unknown)}.")

    config.set_config_value(key, value)
    click.echo(f"✓ Set '{key}' to: {value}")
