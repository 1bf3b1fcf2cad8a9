import pytest

from nethermind.pairscope.summary import (
    calculate_summaries,
    format_token_amount,
    format_usd,
    price_series,
    select_display_token,
)
from nethermind.pairscope.types.pools import PairInfo, PoolDayData


def _day(date: str, volume_usd: str, volume_0: str, volume_1: str, tvl: str, fees="0", tx_count="0"):
    return PoolDayData(
        date=date,
        date_timestamp=0,
        volume_usd=volume_usd,
        volume_token_0=volume_0,
        volume_token_1=volume_1,
        tvl_usd=tvl,
        fees_usd=fees,
        tx_count=tx_count,
    )


# Newest day first, as returned by the subgraph
DAY_DATA = [
    _day("Jan 6, 2024", "2000", "1000", "4", "300", fees="6", tx_count="10"),
    _day("Jan 5, 2024", "1000", "1000", "2", "100", fees="3", tx_count="5"),
]


class TestSummaries:
    def test_totals(self):
        summary = calculate_summaries(DAY_DATA)

        assert summary is not None
        assert summary.total_volume_usd == 3000
        assert summary.total_volume_token_0 == 2000
        assert summary.total_volume_token_1 == 6
        assert summary.avg_tvl == 200
        assert summary.total_fees == 9
        assert summary.total_tx_count == 15
        assert summary.days == 2

    def test_empty(self):
        assert calculate_summaries([]) is None

    def test_unparseable_values_count_as_zero(self):
        summary = calculate_summaries([_day("Jan 5, 2024", "abc", "1", "1", "", tx_count="n/a")])
        assert summary.total_volume_usd == 0
        assert summary.avg_tvl == 0
        assert summary.total_tx_count == 0


class TestFormatting:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2500000000", "$2.50B"),
            (1_234_567, "$1.23M"),
            ("1000", "$1.00K"),
            ("12.345678", "$12.35"),
            (0, "$0.00"),
            ("not a number", "$0"),
            (None, "$0"),
            ("nan", "$0"),
        ],
    )
    def test_format_usd(self, value, expected):
        assert format_usd(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [("2500000000", "2500.00M"), ("1500", "1.50K"), ("0.5", "0.50"), ("bad", "0.00")],
    )
    def test_format_token_amount(self, value, expected):
        assert format_token_amount(value) == expected


class TestPriceSeries:
    def test_display_token_skips_quote_tokens(self):
        assert select_display_token(PairInfo(token_0="USDC", token_1="PEPE")) == (1, "PEPE")
        assert select_display_token(PairInfo(token_0="weth", token_1="UNI")) == (1, "UNI")
        assert select_display_token(PairInfo(token_0="UNI", token_1="WETH")) == (0, "UNI")
        assert select_display_token(PairInfo(token_0="USDC.e", token_1="LINK")) == (1, "LINK")
        assert select_display_token(PairInfo(token_0="UNI", token_1="LINK")) == (0, "UNI")

    def test_series_is_chronological(self):
        series = price_series(DAY_DATA, PairInfo(token_0="UNI", token_1="WETH"))
        assert series == [("Jan 5, 2024", 1.0), ("Jan 6, 2024", 2.0)]

    def test_series_uses_display_token_volume(self):
        series = price_series(DAY_DATA, PairInfo(token_0="USDC", token_1="WETH"))
        assert series == [("Jan 5, 2024", 500.0), ("Jan 6, 2024", 500.0)]

    def test_zero_volume_days(self):
        day_data = [_day("Jan 5, 2024", "0", "10", "10", "0"), _day("Jan 4, 2024", "10", "0", "0", "0")]
        series = price_series(day_data, PairInfo(token_0="UNI", token_1="WETH"))
        assert series == [("Jan 4, 2024", 0.0), ("Jan 5, 2024", 0.0)]
