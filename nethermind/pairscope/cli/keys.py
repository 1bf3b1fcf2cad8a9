import logging

import click

from nethermind.pairscope.credentials import KNOWN_CREDENTIALS

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("cli").getChild("keys")

# isort: skip_file
# pylint: disable=import-outside-toplevel

credential_name_argument = click.argument("name", type=click.Choice(list(KNOWN_CREDENTIALS)))


def _mask(key: str) -> str:
    """
    >>> _mask("ABCDEFGH1234")
    'ABCD****1234'
    """
    if len(key) <= 8:
        return "*" * len(key)
    return f"{key[:4]}****{key[-4:]}"


@click.group("keys", short_help="Manage saved API keys")
def keys_group():
    """
    Saves API keys to the local credential cache at $PAIRSCOPE_HOME/credentials.json.  Keys passed with
    --api-key or set in environment variables take precedence over saved keys.
    """


@keys_group.command(name="set")
@credential_name_argument
@click.argument("value")
def set_command(name: str, value: str):
    """Saves an API key"""
    from rich.console import Console
    from nethermind.pairscope.cli.utils import handle_cli_errors
    from nethermind.pairscope.credentials import CredentialStore

    console = Console()
    store = CredentialStore()
    with handle_cli_errors(console):
        store.set(name, value)
    console.print(f"[green]Saved {name} API key to {store.path}")


@keys_group.command()
def show():
    """Lists saved API keys.  Keys are masked"""
    from rich.console import Console
    from rich.table import Table
    from nethermind.pairscope.cli.utils import handle_cli_errors
    from nethermind.pairscope.credentials import CredentialStore

    console = Console()
    store = CredentialStore()
    with handle_cli_errors(console):
        saved = {name: store.get(name) for name in store.names()}

    if not saved:
        console.print(f"No API keys saved in {store.path}")
        return

    table = Table(box=None)
    table.add_column("Name", style="bold")
    table.add_column("Key")
    for name, key in saved.items():
        table.add_row(name, _mask(key or ""))
    console.print(table)


@keys_group.command()
@credential_name_argument
def remove(name: str):
    """Removes a saved API key"""
    from rich.console import Console
    from nethermind.pairscope.cli.utils import handle_cli_errors
    from nethermind.pairscope.credentials import CredentialStore

    console = Console()
    with handle_cli_errors(console):
        removed = CredentialStore().remove(name)

    if removed:
        console.print(f"[green]Removed {name} API key")
    else:
        console.print(f"[yellow]No {name} API key is saved")
