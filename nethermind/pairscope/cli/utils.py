import logging
from contextlib import contextmanager
from logging import Logger
from typing import Iterator, Sequence

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from nethermind.pairscope.analytics.coingecko import network_display_name
from nethermind.pairscope.config import ExplorerConfig
from nethermind.pairscope.exceptions import (
    CoinGeckoError,
    ConfigurationError,
    ContractReadError,
    CredentialError,
    ExplorerError,
    SubgraphError,
)
from nethermind.pairscope.subgraph.client import DAY_RANGES
from nethermind.pairscope.summary import (
    calculate_summaries,
    format_token_amount,
    format_usd,
    select_display_token,
)
from nethermind.pairscope.types.explorer import ContractCallResult
from nethermind.pairscope.types.networks import SupportedNetwork
from nethermind.pairscope.types.pools import PairDayData, TrendingPool
from nethermind.pairscope.utils import safe_float

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("cli")

PAIRSCOPE_ERRORS = (
    ContractReadError,
    ExplorerError,
    SubgraphError,
    CoinGeckoError,
    CredentialError,
    ConfigurationError,
)

# Contract call backing each field of ContractCallResult.to_dict()
FIELD_CALLS = {
    "fee": "fee",
    "feePercentage": "fee",
    "token0": "token0",
    "token1": "token1",
    "liquidity": "liquidity",
    "tickSpacing": "tickSpacing",
    "sqrtPriceX96": "slot0",
}


def cli_logger_config(instrument_logger: Logger, verbose: bool = False) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


@contextmanager
def handle_cli_errors(console: Console) -> Iterator[None]:
    """Prints pairscope errors in red & exits with status 1 instead of printing a traceback"""
    try:
        yield
    except PAIRSCOPE_ERRORS as exc:
        console.print(f"[red]{escape(str(exc))}")
        raise SystemExit(1) from exc


# -------------------------------------------------------
#    CLI Secrets & Connections
# -------------------------------------------------------
api_key_option = click.option(
    "--api-key",
    "api_key",
    default=None,
    help="API key for the upstream service.  If not provided, falls back to the service's environment variable, "
    "then to keys saved with `pairscope keys set`",
)
subgraph_url_option = click.option(
    "--subgraph-url",
    "subgraph_url",
    default=None,
    help="Full GraphQL url of the subgraph.  Overrides the gateway url built from the API key & subgraph id. "
    "If not provided, will use the SUBGRAPH_URL environment variable",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log upstream requests & responses",
)

# -------------------------------------------------------
#    Pool Selection Parameters
# -------------------------------------------------------
network_option = click.option(
    "--network",
    "-n",
    "network",
    type=click.Choice(list(SupportedNetwork.__members__.keys())),
    default="ethereum",
    show_default=True,
    help="Network the pool is deployed on",
)
dex_option = click.option(
    "--dex",
    "dex_id",
    type=str,
    default=None,
    help="CoinGecko DEX id, ie uniswap_v3 or uniswap_v2.  Defaults to the first DEX supported on the network",
)
days_option = click.option(
    "--days",
    "-d",
    "days",
    type=click.Choice([str(days) for days in DAY_RANGES]),
    default="60",
    show_default=True,
    help="Number of days of pool data to fetch",
)


# -------------------------------------------------------
#    Rich Renderers
# -------------------------------------------------------
def contract_info_table(info: ContractCallResult, explorer_config: ExplorerConfig | None = None) -> Table:
    """Renders pool contract parameters as a two column table.  Fields whose call failed are marked unavailable"""
    table = Table(title="Pool Contract Info", box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    for field_name, value in info.to_dict().items():
        rendered = str(value)
        if field_name == "feePercentage":
            rendered = f"{value}%"
        if FIELD_CALLS[field_name] in info.unavailable:
            rendered += " [yellow](unavailable)"
        elif explorer_config and field_name in ("token0", "token1"):
            rendered = f"[link={explorer_config.address_url(value)}]{value}[/link]"
        table.add_row(field_name, rendered)

    return table


def day_data_table(pair_data: PairDayData) -> Table:
    """Renders daily pool statistics, with a summary footer"""
    pair_info = pair_data.pair_info
    table = Table(
        title=f"{pair_info.token_0}/{pair_info.token_1} Daily Volume",
        show_footer=True,
    )

    summary = calculate_summaries(pair_data.day_data)
    footer = (
        ("Total", "", "", "", "", "")
        if summary is None
        else (
            f"Total ({summary.days} days)",
            format_usd(summary.total_volume_usd),
            format_usd(summary.total_fees),
            f"{format_token_amount(summary.total_volume_token_0)} / "
            f"{format_token_amount(summary.total_volume_token_1)}",
            f"{format_usd(summary.avg_tvl)} (avg)",
            f"{summary.total_tx_count:,}",
        )
    )

    columns = (
        "Date",
        "Volume (USD)",
        "Fees (USD)",
        f"Volume ({pair_info.token_0} / {pair_info.token_1})",
        "TVL (USD)",
        "Transactions",
    )
    for column, footer_text in zip(columns, footer):
        table.add_column(column, footer=footer_text, justify="left" if column == "Date" else "right")

    for day in pair_data.day_data:
        table.add_row(
            day.date,
            format_usd(day.volume_usd),
            format_usd(day.fees_usd),
            f"{format_token_amount(day.volume_token_0)} / {format_token_amount(day.volume_token_1)}",
            format_usd(day.tvl_usd),
            day.tx_count,
        )

    return table


def price_series_table(series: Sequence[tuple[str, float]], pair_data: PairDayData) -> Table:
    """Renders the USD price series of the display token"""
    _, symbol = select_display_token(pair_data.pair_info)
    table = Table(title=f"{symbol} Price (USD)", box=None)
    table.add_column("Date")
    table.add_column("Price", justify="right")
    for date, price in series:
        table.add_row(date, f"${price:.4f}")
    return table


def trending_pools_table(pools: Sequence[TrendingPool]) -> Table:
    """Renders trending pools sorted as returned by CoinGecko.  The --network column is the value to pass to
    ``pairscope pool volume`` for the pool
    """
    table = Table(title="Trending Pools")
    table.add_column("Pool", style="bold")
    table.add_column("Network")
    table.add_column("--network")
    table.add_column("DEX")
    table.add_column("24h Volume", justify="right")
    table.add_column("24h Change", justify="right")
    table.add_column("Liquidity", justify="right")
    table.add_column("24h Txns (Buys/Sells)", justify="right")
    table.add_column("Address")

    for pool in pools:
        change = safe_float(pool.price_change_percentage_24h)
        cli_network = SupportedNetwork.from_coingecko_id(pool.network)
        change_color = "green" if change >= 0 else "red"
        table.add_row(
            pool.name,
            network_display_name(pool.network),
            cli_network.value if cli_network else "-",
            pool.dex,
            format_usd(pool.volume_usd_24h),
            f"[{change_color}]{change:.2f}%",
            format_usd(pool.reserve_in_usd),
            f"{pool.transactions_24h.buys}/{pool.transactions_24h.sells}",
            pool.address,
        )

    return table
