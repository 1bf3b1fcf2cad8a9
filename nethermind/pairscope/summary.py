"""
Aggregates & display formatting for pool day data.
"""
import logging
from typing import Literal, Sequence

from nethermind.pairscope.types.pools import PairInfo, PoolDayData, PoolSummary
from nethermind.pairscope.utils import safe_float, safe_int

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("summary")

# Symbols that are treated as the quote side of a pair when charting prices
STABLE_TOKENS = frozenset({"WETH", "USDC", "USDT", "WETH.E", "USDC.E", "USDT.E"})


def calculate_summaries(day_data: Sequence[PoolDayData]) -> PoolSummary | None:
    """
    Sums volumes, fees and transaction counts over a day range, and averages TVL.

    :param day_data: day data returned from the subgraph
    :return: :class:`PoolSummary`, or None if day_data is empty
    """
    if not day_data:
        return None

    return PoolSummary(
        total_volume_usd=sum(safe_float(day.volume_usd) for day in day_data),
        total_volume_token_0=sum(safe_float(day.volume_token_0) for day in day_data),
        total_volume_token_1=sum(safe_float(day.volume_token_1) for day in day_data),
        avg_tvl=sum(safe_float(day.tvl_usd) for day in day_data) / len(day_data),
        total_fees=sum(safe_float(day.fees_usd) for day in day_data),
        total_tx_count=sum(safe_int(day.tx_count) for day in day_data),
        days=len(day_data),
    )


def format_usd(value: str | float | int | None) -> str:
    """
    Formats a dollar value with a B, M or K suffix

    >>> format_usd("1234567")
    '$1.23M'
    >>> format_usd(999.5)
    '$999.50'
    >>> format_usd("n/a")
    '$0'
    """
    try:
        num = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return "$0"
    if num != num:  # NaN
        return "$0"

    if num >= 1_000_000_000:
        return f"${num / 1_000_000_000:.2f}B"
    if num >= 1_000_000:
        return f"${num / 1_000_000:.2f}M"
    if num >= 1_000:
        return f"${num / 1_000:.2f}K"
    return f"${num:.2f}"


def format_token_amount(value: str | float | int | None) -> str:
    """
    Formats a token amount with an M or K suffix

    >>> format_token_amount("2500000")
    '2.50M'
    >>> format_token_amount("12.5")
    '12.50'
    """
    num = safe_float(value)
    if num >= 1_000_000:
        return f"{num / 1_000_000:.2f}M"
    if num >= 1_000:
        return f"{num / 1_000:.2f}K"
    return f"{num:.2f}"


def select_display_token(pair_info: PairInfo) -> tuple[Literal[0, 1], str]:
    """
    Selects the token whose USD price is charted.  If token0 is WETH or a stablecoin, token1 is charted.  Otherwise,
    token0 is charted.

    :return: (token index, token symbol)
    """
    if pair_info.token_0.upper() in STABLE_TOKENS:
        return 1, pair_info.token_1
    return 0, pair_info.token_0


def price_series(day_data: Sequence[PoolDayData], pair_info: PairInfo) -> list[tuple[str, float]]:
    """
    Computes a daily USD price series for the display token from volume ratios.  Day data from the subgraph
    is newest first, so the series is reversed into chronological order.

    :param day_data: day data, newest first
    :param pair_info: token symbols for the pool
    :return: list of (date, usd price).  Prices are 0 for days with no volume
    """
    token_index, symbol = select_display_token(pair_info)
    logger.debug(f"Computing USD price series for {symbol}")

    series = []
    for day in reversed(day_data):
        volume_usd = safe_float(day.volume_usd)
        volume_token = safe_float(day.volume_token_0 if token_index == 0 else day.volume_token_1)
        price = volume_usd / volume_token if volume_usd > 0 and volume_token > 0 else 0.0
        series.append((day.date, price))
    return series
