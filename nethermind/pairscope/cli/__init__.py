import click
from dotenv import load_dotenv

from nethermind.pairscope.cli.decode import decode_group
from nethermind.pairscope.cli.keys import keys_group
from nethermind.pairscope.cli.pool import pool_group
from nethermind.pairscope.cli.trending import trending_command


@click.group()
def pairscope_cli():
    """Command Line Interface for Pairscope DEX pool analytics"""
    load_dotenv()


# Adding Command Groups
pairscope_cli.add_command(pool_group, name="pool")
pairscope_cli.add_command(trending_command, name="trending")
pairscope_cli.add_command(decode_group, name="decode")
pairscope_cli.add_command(keys_group, name="keys")
