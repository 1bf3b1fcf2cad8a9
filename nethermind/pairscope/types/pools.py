from dataclasses import dataclass, field


@dataclass(slots=True)
class PoolDayData:
    """
    Daily pool statistics from the subgraph.  Numeric values are kept as the decimal strings returned
    by the subgraph, and are only parsed when summarized or formatted.
    """

    date: str
    date_timestamp: int
    volume_usd: str
    volume_token_0: str
    volume_token_1: str
    tvl_usd: str
    fees_usd: str = "0"
    tx_count: str = "0"
    open: str = "0"
    high: str = "0"
    low: str = "0"
    close: str = "0"
    token_0_price: str = "0"
    token_1_price: str = "0"


@dataclass(slots=True)
class PairInfo:
    """Token symbols & locked value for a pool"""

    token_0: str
    token_1: str
    token_0_name: str | None = None
    token_1_name: str | None = None
    total_value_locked_token_0: str | None = None
    total_value_locked_token_1: str | None = None
    total_value_locked_usd: str | None = None


@dataclass(slots=True)
class PairDayData:
    """Day data for a pool, ordered newest first"""

    day_data: list[PoolDayData]
    pair_info: PairInfo


@dataclass(slots=True)
class TokenInfo:
    """Token metadata included in CoinGecko pool responses"""

    address: str = ""
    name: str = "Unknown"
    symbol: str = "???"
    image_url: str = ""


@dataclass(slots=True)
class TransactionCounts:
    """Buy & sell counts over a time window"""

    buys: int = 0
    sells: int = 0
    buyers: int = 0
    sellers: int = 0


@dataclass(slots=True)
class TrendingPool:
    """Pool returned from the CoinGecko trending pools or megafilter endpoints"""

    id: str
    address: str
    name: str
    network: str
    dex: str
    dex_id: str | None
    base_token: TokenInfo
    quote_token: TokenInfo
    base_token_price_usd: str | None
    quote_token_price_usd: str | None
    volume_usd_24h: str = "0"
    price_change_percentage_24h: str = "0"
    reserve_in_usd: str = "0"
    transactions_24h: TransactionCounts = field(default_factory=TransactionCounts)


@dataclass(frozen=True, slots=True)
class PoolSummary:
    """Aggregate of a day data range"""

    total_volume_usd: float
    total_volume_token_0: float
    total_volume_token_1: float
    avg_tvl: float
    total_fees: float
    total_tx_count: int
    days: int
