"""
Client for the CoinGecko on-chain pools API.

Two endpoints are supported:

* ``/onchain/networks/trending_pools`` returns trending pools across all networks.  It can not be filtered by
  network, so multiple pages are fetched and filtered client side to the network & DEX pairs that have subgraph
  support.
* ``/onchain/pools/megafilter`` supports server side network filtering, but requires a higher tier API plan.
"""
import logging
import time
from typing import Any, Callable

import requests
from pydantic import BaseModel, Field, ValidationError

from nethermind.pairscope.config import CoinGeckoConfig
from nethermind.pairscope.exceptions import CoinGeckoError
from nethermind.pairscope.types.http import HTTPSession
from nethermind.pairscope.types.networks import SupportedNetwork, supported_pool_pairs
from nethermind.pairscope.types.pools import TokenInfo, TransactionCounts, TrendingPool
from nethermind.pairscope.utils import safe_int

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("analytics").getChild("coingecko")

INCLUDE = ["base_token", "quote_token", "dex", "network"]
MEGAFILTER_CHECKS = ["no_honeypot"]
MEGAFILTER_SORT = "h24_volume_usd_desc"

NETWORK_NAMES = {
    "eth": "Ethereum",
    "base": "Base",
    "gno": "Gnosis",
    "arbitrum": "Arbitrum",
    "bsc": "BNB Chain",
    "polygon": "Polygon",
    "optimism": "Optimism",
    "avalanche": "Avalanche",
    "solana": "Solana",
}


class ResourceIdentifier(BaseModel):
    """JSON:API resource linkage"""

    id: str | None = None
    type: str | None = None


class Relationship(BaseModel):
    """JSON:API relationship"""

    data: ResourceIdentifier | None = None


class TransactionWindow(BaseModel):
    """Transaction counts over a window.  Counts are occasionally null"""

    buys: int | None = 0
    sells: int | None = 0
    buyers: int | None = 0
    sellers: int | None = 0


class PoolAttributes(BaseModel):
    """Attributes of a pool resource.  Pools missing an address or name are kept with placeholder values"""

    address: str = ""
    name: str = "Unknown"
    base_token_price_usd: str | None = None
    quote_token_price_usd: str | None = None
    reserve_in_usd: str | None = None
    volume_usd: dict[str, str | None] = Field(default_factory=dict)
    price_change_percentage: dict[str, str | None] = Field(default_factory=dict)
    transactions: dict[str, TransactionWindow] = Field(default_factory=dict)


class PoolResource(BaseModel):
    """Pool resource in the ``data`` array"""

    id: str
    attributes: PoolAttributes
    relationships: dict[str, Relationship] = Field(default_factory=dict)

    def related_id(self, relation: str) -> str | None:
        """Returns the id of a related resource, or None if the relationship is missing"""
        relationship = self.relationships.get(relation)
        if relationship is None or relationship.data is None:
            return None
        return relationship.data.id


class TokenAttributes(BaseModel):
    """Attributes of an included token resource"""

    address: str | None = None
    name: str | None = None
    symbol: str | None = None
    image_url: str | None = None


class NamedAttributes(BaseModel):
    """Attributes of included dex and network resources"""

    name: str | None = None


class IncludedResource(BaseModel):
    """Resource in the ``included`` array.  Attributes are validated per resource type"""

    id: str
    type: str
    attributes: dict[str, Any] = Field(default_factory=dict)


class PoolsDocument(BaseModel):
    """Top level JSON:API document returned by the pools endpoints"""

    data: list[PoolResource] = Field(default_factory=list)
    included: list[IncludedResource] = Field(default_factory=list)


def network_display_name(network: str) -> str:
    """
    Returns a display name for a CoinGecko network id

    >>> network_display_name("gno")
    'Gnosis'
    >>> network_display_name("zksync")
    'ZKSYNC'
    """
    return NETWORK_NAMES.get(network, network.upper())


def is_supported_pool(network: str, dex_id: str | None) -> bool:
    """Returns True if the network & DEX combination has a configured subgraph deployment"""
    return dex_id is not None and (network, dex_id) in supported_pool_pairs()


def parse_pools(payload: Any, filter_supported: bool) -> list[TrendingPool]:
    """
    Parses a pools JSON:API document, resolving base tokens, quote tokens and DEXes from the ``included`` array

    :param payload: decoded JSON response
    :param filter_supported: if True, only returns pools on supported network & DEX combinations
    :return: list of :class:`TrendingPool`
    """
    return _pools_from_document(_validate_document(payload), filter_supported)


def _validate_document(payload: Any) -> PoolsDocument:
    try:
        return PoolsDocument.model_validate(payload)
    except ValidationError as exc:
        raise CoinGeckoError("CoinGecko returned an unexpected pools response") from exc


def _pools_from_document(document: PoolsDocument, filter_supported: bool) -> list[TrendingPool]:
    tokens: dict[str, TokenAttributes] = {}
    dexes: dict[str, NamedAttributes] = {}
    for item in document.included:
        try:
            match item.type:
                case "token":
                    tokens[item.id] = TokenAttributes.model_validate(item.attributes)
                case "dex":
                    dexes[item.id] = NamedAttributes.model_validate(item.attributes)
        except ValidationError:
            logger.debug(f"Skipping included {item.type} {item.id} with unexpected attributes")

    pools = []
    for pool in document.data:
        attrs = pool.attributes
        dex_id = pool.related_id("dex")
        base_token = tokens.get(pool.related_id("base_token") or "", TokenAttributes())
        quote_token = tokens.get(pool.related_id("quote_token") or "", TokenAttributes())
        dex = dexes.get(dex_id or "", NamedAttributes())
        transactions = attrs.transactions.get("h24", TransactionWindow())

        pools.append(
            TrendingPool(
                id=pool.id,
                address=attrs.address,
                name=attrs.name,
                # Pool ids are prefixed with the network id, ie "eth_0x88e6..."
                network=pool.id.split("_")[0],
                dex=dex.name or dex_id or "unknown",
                dex_id=dex_id,
                base_token=_token_info(base_token),
                quote_token=_token_info(quote_token),
                base_token_price_usd=attrs.base_token_price_usd,
                quote_token_price_usd=attrs.quote_token_price_usd,
                volume_usd_24h=attrs.volume_usd.get("h24") or "0",
                price_change_percentage_24h=attrs.price_change_percentage.get("h24") or "0",
                reserve_in_usd=attrs.reserve_in_usd or "0",
                transactions_24h=TransactionCounts(
                    buys=safe_int(transactions.buys),
                    sells=safe_int(transactions.sells),
                    buyers=safe_int(transactions.buyers),
                    sellers=safe_int(transactions.sellers),
                ),
            )
        )

    if filter_supported:
        return [pool for pool in pools if is_supported_pool(pool.network, pool.dex_id)]
    return pools


def _token_info(token: TokenAttributes) -> TokenInfo:
    return TokenInfo(
        address=token.address or "",
        name=token.name or "Unknown",
        symbol=token.symbol or "???",
        image_url=token.image_url or "",
    )


class CoinGeckoClient:
    """Fetches trending pools from the CoinGecko on-chain API"""

    config: CoinGeckoConfig

    def __init__(
        self,
        config: CoinGeckoConfig,
        session: HTTPSession | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self._session = session or requests.Session()
        self._sleep = sleep

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.config.base_url}{path}"
        logger.debug(f"Fetching {url} with params {params}")
        try:
            response = self._session.get(
                url,
                params=params,
                headers={"x-cg-pro-api-key": self.config.api_key, "Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise CoinGeckoError(f"Could not reach CoinGecko API: {exc}") from exc

        if response.status_code != 200:
            logger.error(f"CoinGecko API error for {url}: {response.status_code} {response.text}")
            raise CoinGeckoError(f"CoinGecko API error: {response.status_code} - {response.reason}")

        try:
            return response.json()
        except ValueError as exc:
            raise CoinGeckoError("CoinGecko API returned invalid JSON") from exc

    def fetch_trending_pools(self, use_megafilter: bool = False) -> list[TrendingPool]:
        """
        Fetches trending pools on supported networks & DEXes

        :param use_megafilter: use the megafilter endpoint, which requires a Pro+ API plan
        :return: list of :class:`TrendingPool`
        """
        if not self.config.api_key:
            raise CoinGeckoError("CoinGecko API key is required")

        if use_megafilter:
            return self._fetch_with_megafilter()
        return self._fetch_trending_with_pagination()

    def _fetch_with_megafilter(self) -> list[TrendingPool]:
        params = {
            "include": ",".join(INCLUDE),
            "page": 1,
            "networks": ",".join(network.coingecko_id for network in SupportedNetwork),
            "checks": ",".join(MEGAFILTER_CHECKS),
            "sort": MEGAFILTER_SORT,
        }
        # Megafilter results are already filtered to supported networks server side
        return parse_pools(self._get("/onchain/pools/megafilter", params), filter_supported=False)

    def _fetch_trending_with_pagination(self) -> list[TrendingPool]:
        supported_pools: list[TrendingPool] = []

        for page in range(1, self.config.max_pages + 1):
            if page > 1 and self.config.page_delay > 0:
                self._sleep(self.config.page_delay)

            logger.info(f"Fetching trending pools page {page}...")
            payload = self._get("/onchain/networks/trending_pools", {"include": ",".join(INCLUDE), "page": page})
            document = _validate_document(payload)
            page_pools = _pools_from_document(document, filter_supported=True)
            supported_pools.extend(page_pools)

            logger.info(f"Page {page}: Found {len(page_pools)} supported pools (total: {len(supported_pools)})")

            if len(supported_pools) >= self.config.min_supported_pools or not document.data:
                break

        logger.info(f"Found {len(supported_pools)} supported trending pools")
        return supported_pools
