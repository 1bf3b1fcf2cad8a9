import logging
import time
from typing import Annotated, Any, Callable

import requests
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from nethermind.pairscope.config import SubgraphConfig
from nethermind.pairscope.exceptions import PoolNotFoundError, SubgraphError
from nethermind.pairscope.subgraph import queries
from nethermind.pairscope.types.http import HTTPSession
from nethermind.pairscope.types.networks import DexVersion
from nethermind.pairscope.types.pools import PairDayData, PairInfo, PoolDayData
from nethermind.pairscope.utils import format_unix_date

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("subgraph")

DAY_RANGES = (30, 60, 90, 120, 365)

# Subgraphs return BigDecimal & BigInt values as strings, but mocked or proxied endpoints may return numbers
NumericString = Annotated[str, BeforeValidator(lambda value: str(value) if value is not None else "0")]


class _SubgraphModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GraphQLError(_SubgraphModel):
    """Error entry of a GraphQL response"""

    message: str = "Unknown GraphQL error"


class GraphQLResponse(_SubgraphModel):
    """GraphQL response envelope"""

    data: dict[str, Any] | None = None
    errors: list[GraphQLError] | None = None


class SubgraphToken(_SubgraphModel):
    """Token entity nested in pools and pairs"""

    symbol: str
    name: str | None = None


class V3Pool(_SubgraphModel):
    """Pool entity of a V3 subgraph"""

    id: str
    token0: SubgraphToken
    token1: SubgraphToken
    total_value_locked_token_0: NumericString | None = Field(None, alias="totalValueLockedToken0")
    total_value_locked_token_1: NumericString | None = Field(None, alias="totalValueLockedToken1")
    total_value_locked_usd: NumericString | None = Field(None, alias="totalValueLockedUSD")


class V3PoolDayData(_SubgraphModel):
    """PoolDayData entity of a V3 subgraph"""

    date: int
    volume_usd: NumericString = Field(alias="volumeUSD")
    volume_token_0: NumericString = Field(alias="volumeToken0")
    volume_token_1: NumericString = Field(alias="volumeToken1")
    tvl_usd: NumericString = Field(alias="tvlUSD")
    fees_usd: NumericString = Field("0", alias="feesUSD")
    tx_count: NumericString = Field("0", alias="txCount")
    open: NumericString = "0"
    high: NumericString = "0"
    low: NumericString = "0"
    close: NumericString = "0"
    token_0_price: NumericString = Field("0", alias="token0Price")
    token_1_price: NumericString = Field("0", alias="token1Price")


class V3DayDataResponse(_SubgraphModel):
    """Result of :data:`queries.POOL_DAY_DATA_QUERY`"""

    pool: V3Pool | None = None
    pool_day_datas: list[V3PoolDayData] = Field(default_factory=list, alias="poolDayDatas")


class V2Pair(_SubgraphModel):
    """Pair entity of a V2 subgraph"""

    id: str
    token0: SubgraphToken
    token1: SubgraphToken
    reserve_0: NumericString | None = Field(None, alias="reserve0")
    reserve_1: NumericString | None = Field(None, alias="reserve1")
    reserve_usd: NumericString | None = Field(None, alias="reserveUSD")


class V2PairDayData(_SubgraphModel):
    """PairDayData entity of a V2 subgraph"""

    date: int
    daily_volume_usd: NumericString = Field(alias="dailyVolumeUSD")
    daily_volume_token_0: NumericString = Field(alias="dailyVolumeToken0")
    daily_volume_token_1: NumericString = Field(alias="dailyVolumeToken1")
    reserve_usd: NumericString = Field("0", alias="reserveUSD")
    daily_txns: NumericString = Field("0", alias="dailyTxns")


class V2DayDataResponse(_SubgraphModel):
    """Result of :data:`queries.PAIR_DAY_DATA_QUERY`"""

    pair: V2Pair | None = None
    pair_day_datas: list[V2PairDayData] = Field(default_factory=list, alias="pairDayDatas")


class SubgraphClient:
    """
    Client for Uniswap style DEX subgraphs.  Supports V3 schemas (pools & poolDayDatas) and V2 schemas
    (pairs & pairDayDatas), returning both as :class:`PairDayData`

    >>> from nethermind.pairscope.types.networks import SupportedNetwork
    >>> config = SubgraphConfig.for_network(SupportedNetwork.ethereum, api_key="...")  # doctest: +SKIP
    >>> SubgraphClient(config).fetch_pair_day_data("0x88e6...5640", day_range=30)  # doctest: +SKIP
    """

    config: SubgraphConfig

    def __init__(
        self,
        config: SubgraphConfig,
        session: HTTPSession | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self._session = session or requests.Session()
        self._sleep = sleep

    def _execute_query(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Executes a GraphQL query, retrying network errors with a linear backoff

        :param query: GraphQL query string
        :param variables: query variables
        :return: the ``data`` field of the response
        :raises SubgraphError: on GraphQL errors, malformed responses, or when retries are exhausted
        """
        payload: dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        last_error = SubgraphError("Subgraph query was not executed")
        for attempt in range(self.config.max_retries):
            if attempt > 0:
                logger.info(f"Retrying subgraph query -- Retry {attempt}")
            try:
                response = self._session.post(
                    self.config.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.config.timeout,
                )
                response.raise_for_status()
                body = response.json()
            except requests.exceptions.Timeout:
                last_error = SubgraphError(f"Subgraph request timed out after {self.config.timeout} seconds")
            except requests.exceptions.RequestException as exc:
                last_error = SubgraphError(f"Network error querying subgraph: {exc}")
            else:
                return self._unpack_response(body)

            logger.warning(f"{last_error}  (Attempt {attempt + 1} of {self.config.max_retries})")
            if attempt < self.config.max_retries - 1:
                self._sleep(self.config.retry_delay * (attempt + 1))

        raise last_error

    @staticmethod
    def _unpack_response(body: Any) -> dict[str, Any]:
        try:
            response = GraphQLResponse.model_validate(body)
        except ValidationError as exc:
            raise SubgraphError("Subgraph returned a malformed response") from exc

        if response.errors:
            raise SubgraphError(f"GraphQL Error: {'; '.join(error.message for error in response.errors)}")
        if response.data is None:
            raise SubgraphError("Subgraph response is missing the 'data' field")
        return response.data

    def fetch_pair_day_data(self, pair_address: str, day_range: int = 60) -> PairDayData:
        """
        Fetches daily volume, TVL and fee data for a pool, newest day first.

        :param pair_address: pool or pair contract address
        :param day_range: number of days to fetch.  One of 30, 60, 90, 120 or 365
        :return: :class:`PairDayData`
        :raises PoolNotFoundError: if the subgraph does not index the address
        :raises SubgraphError: if the pool has no day data, or the query fails
        """
        if day_range not in DAY_RANGES:
            raise SubgraphError(f"Invalid day range {day_range}.  Valid day ranges are {list(DAY_RANGES)}")

        variables = {"pairAddress": pair_address.lower(), "days": day_range}
        logger.info(f"Fetching {day_range} days of {self.config.dex_version.value} data for {pair_address.lower()}")

        match self.config.dex_version:
            case DexVersion.v3:
                result = self._parse_v3(self._execute_query(queries.POOL_DAY_DATA_QUERY, variables))
            case DexVersion.v2:
                result = self._parse_v2(self._execute_query(queries.PAIR_DAY_DATA_QUERY, variables))
            case _:
                raise SubgraphError(f"Unsupported DEX version {self.config.dex_version}")

        logger.debug(f"Fetched {len(result.day_data)} days for {result.pair_info.token_0}/{result.pair_info.token_1}")
        return result

    @staticmethod
    def _parse_v3(data: dict[str, Any]) -> PairDayData:
        try:
            response = V3DayDataResponse.model_validate(data)
        except ValidationError as exc:
            raise SubgraphError("Subgraph returned unexpected pool data") from exc

        if response.pool is None:
            raise PoolNotFoundError("Pool not found. Please check the address and try again.")
        if not response.pool_day_datas:
            raise SubgraphError("No trading data available for this pool.")

        pool = response.pool
        return PairDayData(
            day_data=[
                PoolDayData(
                    date=format_unix_date(day.date),
                    date_timestamp=day.date,
                    volume_usd=day.volume_usd,
                    volume_token_0=day.volume_token_0,
                    volume_token_1=day.volume_token_1,
                    tvl_usd=day.tvl_usd,
                    fees_usd=day.fees_usd,
                    tx_count=day.tx_count,
                    open=day.open,
                    high=day.high,
                    low=day.low,
                    close=day.close,
                    token_0_price=day.token_0_price,
                    token_1_price=day.token_1_price,
                )
                for day in response.pool_day_datas
            ],
            pair_info=PairInfo(
                token_0=pool.token0.symbol,
                token_1=pool.token1.symbol,
                token_0_name=pool.token0.name,
                token_1_name=pool.token1.name,
                total_value_locked_token_0=pool.total_value_locked_token_0,
                total_value_locked_token_1=pool.total_value_locked_token_1,
                total_value_locked_usd=pool.total_value_locked_usd,
            ),
        )

    @staticmethod
    def _parse_v2(data: dict[str, Any]) -> PairDayData:
        try:
            response = V2DayDataResponse.model_validate(data)
        except ValidationError as exc:
            raise SubgraphError("Subgraph returned unexpected pair data") from exc

        if response.pair is None:
            raise PoolNotFoundError("Pool not found. Please check the address and try again.")
        if not response.pair_day_datas:
            raise SubgraphError("No trading data available for this pool.")

        pair = response.pair
        return PairDayData(
            day_data=[
                PoolDayData(
                    date=format_unix_date(day.date),
                    date_timestamp=day.date,
                    volume_usd=day.daily_volume_usd,
                    volume_token_0=day.daily_volume_token_0,
                    volume_token_1=day.daily_volume_token_1,
                    tvl_usd=day.reserve_usd,
                    tx_count=day.daily_txns,
                )
                for day in response.pair_day_datas
            ],
            pair_info=PairInfo(
                token_0=pair.token0.symbol,
                token_1=pair.token1.symbol,
                token_0_name=pair.token0.name,
                token_1_name=pair.token1.name,
                total_value_locked_token_0=pair.reserve_0,
                total_value_locked_token_1=pair.reserve_1,
                total_value_locked_usd=pair.reserve_usd,
            ),
        )
