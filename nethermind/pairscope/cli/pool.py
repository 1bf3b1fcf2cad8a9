import logging

import click

from nethermind.pairscope.cli.utils import (
    api_key_option,
    days_option,
    dex_option,
    group_options,
    network_option,
    subgraph_url_option,
    verbose_option,
)

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("cli").getChild("pool")

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel,too-many-locals

# Return type of each pool read function, used when decoding a single call
CALL_RETURN_TYPES = {
    "fee": "uint24",
    "token0": "address",
    "token1": "address",
    "liquidity": "uint128",
    "tickSpacing": "int24",
}


@click.group("pool", short_help="Query pool contracts & subgraph day data")
def pool_group():
    """
    Query Uniswap style pools.  Contract parameters are read through the block explorer, and daily
    volume & TVL are read from the DEX subgraph.
    """


@pool_group.command()
@click.argument("pool_address")
@group_options(network_option, api_key_option, verbose_option)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the contract info as JSON")
def info(pool_address: str, network: str, api_key: str | None, verbose: bool, as_json: bool):
    """Reads fee, tokens, liquidity, tick spacing and price from a pool contract"""
    from nethermind.pairscope.cli.utils import cli_logger_config, contract_info_table, handle_cli_errors
    from nethermind.pairscope.config import ExplorerConfig
    from nethermind.pairscope.explorer.pool_reader import fetch_pool_contract_info
    from nethermind.pairscope.types.networks import SupportedNetwork

    console = cli_logger_config(root_logger, verbose)

    with handle_cli_errors(console):
        config = ExplorerConfig.for_network(SupportedNetwork(network), api_key=api_key)
        with console.status(f"Reading pool contract on {SupportedNetwork(network).pretty()}..."):
            contract_info = fetch_pool_contract_info(pool_address, config)

    if as_json:
        console.print_json(data={**contract_info.to_dict(), "unavailable": list(contract_info.unavailable)})
        return

    console.print(contract_info_table(contract_info, config))
    if contract_info.unavailable:
        console.print(
            f"[yellow]Calls failed for {', '.join(contract_info.unavailable)}.  These fields are shown as zero."
        )


@pool_group.command()
@click.argument("pool_address")
@click.argument("function_name", type=click.Choice([*CALL_RETURN_TYPES.keys(), "slot0"]))
@group_options(network_option, api_key_option, verbose_option)
def call(pool_address: str, function_name: str, network: str, api_key: str | None, verbose: bool):
    """Executes a single pool read function & prints the raw and decoded return data"""
    from nethermind.pairscope.cli.utils import cli_logger_config, handle_cli_errors
    from nethermind.pairscope.config import ExplorerConfig
    from nethermind.pairscope.decoding.return_data import decode_slot0, decode_value
    from nethermind.pairscope.explorer.pool_reader import FUNCTION_SELECTORS
    from nethermind.pairscope.explorer.rpc_proxy import call_read_function, unwrap_call_result
    from nethermind.pairscope.types.networks import SupportedNetwork

    console = cli_logger_config(root_logger, verbose)

    with handle_cli_errors(console):
        config = ExplorerConfig.for_network(SupportedNetwork(network), api_key=api_key)
        raw = unwrap_call_result(call_read_function(pool_address, FUNCTION_SELECTORS[function_name], config))

    console.print(f"[bold]Raw:[/bold] {raw}")
    if function_name == "slot0":
        console.print(f"[bold]Decoded:[/bold] {decode_slot0(raw)}")
    else:
        console.print(f"[bold]Decoded:[/bold] {decode_value(raw, CALL_RETURN_TYPES[function_name])}")


@pool_group.command()
@click.argument("pool_address")
@group_options(network_option, dex_option, days_option, api_key_option, subgraph_url_option, verbose_option)
@click.option("--no-prices", is_flag=True, default=False, help="Skip the USD price series")
def volume(
    pool_address: str,
    network: str,
    dex_id: str | None,
    days: str,
    api_key: str | None,
    subgraph_url: str | None,
    verbose: bool,
    no_prices: bool,
):
    """Fetches daily volume, fees & TVL for a pool from the DEX subgraph"""
    from nethermind.pairscope.cli.utils import (
        cli_logger_config,
        day_data_table,
        handle_cli_errors,
        price_series_table,
    )
    from nethermind.pairscope.config import SubgraphConfig
    from nethermind.pairscope.subgraph.client import SubgraphClient
    from nethermind.pairscope.summary import format_usd, price_series
    from nethermind.pairscope.types.networks import SupportedNetwork

    console = cli_logger_config(root_logger, verbose)
    selected_network = SupportedNetwork(network)

    with handle_cli_errors(console):
        config = SubgraphConfig.for_network(selected_network, dex_id=dex_id, api_key=api_key, url=subgraph_url)
        with console.status(f"Fetching {days} days of pool data..."):
            pair_data = SubgraphClient(config).fetch_pair_day_data(pool_address, day_range=int(days))

    pair_info = pair_data.pair_info
    console.print(
        f"[bold]{pair_info.token_0}/{pair_info.token_1}[/bold] on {selected_network.pretty()}  "
        f"TVL: {format_usd(pair_info.total_value_locked_usd or pair_data.day_data[0].tvl_usd)}"
    )
    console.print(day_data_table(pair_data))

    if not no_prices:
        console.print(price_series_table(price_series(pair_data.day_data, pair_info), pair_data))
