import logging
import os
from dataclasses import dataclass

from nethermind.pairscope.credentials import CredentialStore
from nethermind.pairscope.exceptions import ConfigurationError
from nethermind.pairscope.types.networks import DexVersion, SupportedNetwork

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("config")

ETHERSCAN_V2_API = "https://api.etherscan.io/v2/api"
THEGRAPH_GATEWAY = "https://gateway.thegraph.com/api"
COINGECKO_PRO_API = "https://pro-api.coingecko.com/api/v3"


def resolve_api_key(
    explicit: str | None,
    env_var: str,
    credential_name: str,
    store: CredentialStore | None = None,
) -> str | None:
    """
    Resolves an API key.  Keys passed explicitly take precedence over environment variables, which take precedence
    over keys saved in the local credential cache.

    :param explicit: key passed by the caller
    :param env_var: environment variable to check
    :param credential_name: name of the key in the credential cache
    :param store: credential cache.  Defaults to the cache at ``$PAIRSCOPE_HOME``
    :return: API key, or None if no key is configured
    """
    if explicit:
        return explicit
    if env_key := os.environ.get(env_var):
        return env_key

    store = store or CredentialStore()
    stored = store.get(credential_name)
    if stored:
        logger.debug(f"Using {credential_name} API key from {store.path}")
    return stored


@dataclass(frozen=True)
class ExplorerConfig:
    """Connection settings for an Etherscan V2 compatible block explorer API"""

    api_key: str
    chain_id: int = 1
    api_base_url: str = ETHERSCAN_V2_API
    explorer_url: str = "https://etherscan.io"
    call_delay: float = 0.25
    """
        Seconds between sequential contract reads.  The free Etherscan tier allows 5 calls per second
    """
    timeout: int = 30

    @classmethod
    def for_network(
        cls,
        network: SupportedNetwork,
        api_key: str | None = None,
        store: CredentialStore | None = None,
        **kwargs,
    ) -> "ExplorerConfig":
        """
        Builds the explorer config for a network, resolving the API key from the environment or credential cache

        :param network: network to query
        :param api_key: Etherscan API key.  Falls back to ``ETHERSCAN_API_KEY`` and the credential cache
        :param store: credential cache
        :return: ExplorerConfig
        """
        key = resolve_api_key(api_key, "ETHERSCAN_API_KEY", "etherscan", store)
        if not key:
            raise ConfigurationError(
                "Etherscan API key is required.  Pass --api-key, set ETHERSCAN_API_KEY, "
                "or run `pairscope keys set etherscan <key>`"
            )
        return cls(
            api_key=key,
            chain_id=network.chain_id,
            explorer_url=network.explorer_url,
            **kwargs,
        )

    def address_url(self, address: str) -> str:
        """Link to an address on the block explorer website"""
        return f"{self.explorer_url}/address/{address}"


@dataclass(frozen=True)
class SubgraphConfig:
    """Connection settings for a DEX subgraph"""

    api_key: str | None = None
    subgraph_id: str | None = None
    dex_version: DexVersion = DexVersion.v3
    gateway_url: str = THEGRAPH_GATEWAY
    url: str | None = None
    """
        Full subgraph url.  Overrides the gateway url, api key and subgraph id when set
    """
    timeout: int = 30
    max_retries: int = 3
    retry_delay: float = 1.0

    @property
    def endpoint(self) -> str:
        """GraphQL endpoint url"""
        if self.url:
            return self.url
        if not self.api_key or not self.subgraph_id:
            raise ConfigurationError("Subgraph endpoint requires either a url, or an API key and subgraph id")
        return f"{self.gateway_url}/{self.api_key}/subgraphs/id/{self.subgraph_id}"

    @classmethod
    def for_network(
        cls,
        network: SupportedNetwork,
        dex_id: str | None = None,
        api_key: str | None = None,
        url: str | None = None,
        store: CredentialStore | None = None,
        **kwargs,
    ) -> "SubgraphConfig":
        """
        Builds the subgraph config for a DEX deployment on a network.

        :param network: network the pool is deployed on
        :param dex_id: CoinGecko DEX id.  Defaults to the first DEX configured for the network
        :param api_key: The Graph API key.  Falls back to ``THEGRAPH_API_KEY`` and the credential cache
        :param url: explicit subgraph url.  Falls back to ``SUBGRAPH_URL``
        :param store: credential cache
        :return: SubgraphConfig
        """
        deployment = network.deployment(dex_id)
        url = url or os.environ.get("SUBGRAPH_URL")

        if url:
            return cls(url=url, dex_version=deployment.version, subgraph_id=deployment.subgraph_id, **kwargs)

        if deployment.subgraph_id is None:
            raise ConfigurationError(
                f"No subgraph id is configured for {deployment.dex_id} on {network.pretty()}.  "
                f"Pass --subgraph-url or set SUBGRAPH_URL"
            )

        key = resolve_api_key(api_key, "THEGRAPH_API_KEY", "thegraph", store)
        if not key:
            raise ConfigurationError(
                "The Graph API key is required.  Pass --api-key, set THEGRAPH_API_KEY, "
                "or run `pairscope keys set thegraph <key>`"
            )
        return cls(api_key=key, subgraph_id=deployment.subgraph_id, dex_version=deployment.version, **kwargs)


@dataclass(frozen=True)
class CoinGeckoConfig:
    """Connection settings for the CoinGecko on-chain pools API"""

    api_key: str | None = None
    base_url: str = COINGECKO_PRO_API
    max_pages: int = 15
    min_supported_pools: int = 20
    page_delay: float = 0.1
    timeout: int = 30

    @classmethod
    def from_env(
        cls,
        api_key: str | None = None,
        store: CredentialStore | None = None,
        **kwargs,
    ) -> "CoinGeckoConfig":
        """Builds the config, resolving the API key from ``COINGECKO_API_KEY`` or the credential cache"""
        return cls(api_key=resolve_api_key(api_key, "COINGECKO_API_KEY", "coingecko", store), **kwargs)
