import logging

import click

from nethermind.pairscope.cli.utils import api_key_option, group_options, verbose_option

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("cli").getChild("trending")

# isort: skip_file
# pylint: disable=import-outside-toplevel


@click.command("trending")
@group_options(api_key_option, verbose_option)
@click.option(
    "--megafilter",
    is_flag=True,
    default=False,
    help="Use the megafilter endpoint, which filters networks server side.  Requires a Pro+ CoinGecko plan",
)
def trending_command(api_key: str | None, verbose: bool, megafilter: bool):
    """
    Lists trending pools on networks & DEXes with subgraph support.  Requires a CoinGecko Pro API key,
    passed with --api-key, set as COINGECKO_API_KEY, or saved with `pairscope keys set coingecko <key>`
    """
    from nethermind.pairscope.analytics.coingecko import CoinGeckoClient
    from nethermind.pairscope.cli.utils import cli_logger_config, handle_cli_errors, trending_pools_table
    from nethermind.pairscope.config import CoinGeckoConfig

    console = cli_logger_config(root_logger, verbose)

    with handle_cli_errors(console):
        client = CoinGeckoClient(CoinGeckoConfig.from_env(api_key=api_key))
        with console.status("Fetching trending pools..."):
            pools = client.fetch_trending_pools(use_megafilter=megafilter)

    if not pools:
        console.print("[yellow]No trending pools found on supported networks")
        return

    console.print(trending_pools_table(pools))
