import logging

import click

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("cli").getChild("decode")

# isort: skip_file
# pylint: disable=import-outside-toplevel

bits_option = click.option(
    "--bits",
    "-b",
    "bit_width",
    type=int,
    default=256,
    show_default=True,
    help="Bit width of the value.  Must be a multiple of 8 between 8 and 256",
)


@click.group("decode", short_help="Decode raw ABI return data")
def decode_group():
    """
    Decodes hex return data from eth_call.  Invalid hex decodes to zero rather than failing, matching
    how pool contract reads are decoded.
    """


@decode_group.command()
@click.argument("raw")
@bits_option
def uint(raw: str, bit_width: int):
    """Decodes the low bits of a word as an unsigned integer"""
    from nethermind.pairscope.decoding.return_data import decode_unsigned_int

    try:
        click.echo(decode_unsigned_int(raw, bit_width))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--bits") from exc


@decode_group.command(name="int")
@click.argument("raw")
@bits_option
def int_command(raw: str, bit_width: int):
    """Decodes the low bits of a word as a two's complement signed integer"""
    from nethermind.pairscope.decoding.return_data import decode_signed_int

    try:
        click.echo(decode_signed_int(raw, bit_width))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--bits") from exc


@decode_group.command()
@click.argument("raw")
def address(raw: str):
    """Decodes the low 20 bytes of a word as an address"""
    from nethermind.pairscope.decoding.return_data import decode_address

    click.echo(decode_address(raw))


@decode_group.command(name="slice")
@click.argument("raw")
@click.argument("start", type=click.IntRange(min=0))
@click.argument("length", type=click.IntRange(min=0))
def slice_command(raw: str, start: int, length: int):
    """Extracts LENGTH hex characters starting at character START of the return data"""
    from nethermind.pairscope.decoding.return_data import decode_slice

    click.echo(decode_slice(raw, start, length))


@decode_group.command()
@click.argument("raw")
def slot0(raw: str):
    """Decodes the full return data of a Uniswap V3 pool's slot0() function"""
    from rich.console import Console
    from rich.table import Table
    from nethermind.pairscope.decoding.return_data import decode_slot0

    console = Console()
    decoded = decode_slot0(raw)
    if decoded is None:
        console.print("[red]Return data is not a valid slot0() return.  Expected 7 ABI encoded words")
        raise SystemExit(1)

    table = Table(box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("sqrtPriceX96", str(decoded.sqrt_price_x96))
    table.add_row("tick", str(decoded.tick))
    table.add_row("observationIndex", str(decoded.observation_index))
    table.add_row("observationCardinality", str(decoded.observation_cardinality))
    table.add_row("observationCardinalityNext", str(decoded.observation_cardinality_next))
    table.add_row("feeProtocol", str(decoded.fee_protocol))
    table.add_row("unlocked", str(decoded.unlocked))
    console.print(table)
