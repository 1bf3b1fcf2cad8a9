from dataclasses import dataclass
from enum import Enum

from nethermind.pairscope.exceptions import ConfigurationError

# Disabling naming check that wants enums to use UPPER_CASE
# pylint: disable=invalid-name


class DexVersion(Enum):
    """Subgraph schema families.  V2 subgraphs index pairs, V3 subgraphs index pools"""

    v2 = "v2"
    v3 = "v3"


@dataclass(frozen=True, slots=True)
class DexDeployment:
    """A DEX deployment on a network, and the subgraph that indexes it"""

    dex_id: str
    """
        CoinGecko identifier of the DEX, ie ``uniswap_v3``
    """
    version: DexVersion
    subgraph_id: str | None
    """
        Subgraph ID on The Graph decentralized network.  If None, a subgraph url must be configured manually
    """


class SupportedNetwork(Enum):
    """Networks that pairscope can query"""

    ethereum = "ethereum"
    base = "base"
    gnosis = "gnosis"

    def pretty(self) -> str:
        """Returns a pretty version of the network name"""
        return self.value.capitalize()

    @property
    def chain_id(self) -> int:
        """EVM chain id, passed as the ``chainid`` parameter of the Etherscan V2 API"""
        match self:
            case SupportedNetwork.ethereum:
                return 1
            case SupportedNetwork.base:
                return 8453
            case SupportedNetwork.gnosis:
                return 100
        raise NotImplementedError(f"Network {self} does not have a chain id")

    @property
    def coingecko_id(self) -> str:
        """Network identifier used by the CoinGecko on-chain API"""
        match self:
            case SupportedNetwork.ethereum:
                return "eth"
            case SupportedNetwork.base:
                return "base"
            case SupportedNetwork.gnosis:
                return "gno"
        raise NotImplementedError(f"Network {self} does not have a CoinGecko id")

    @property
    def explorer_url(self) -> str:
        """Base url of the block explorer website.  Used for linking addresses"""
        match self:
            case SupportedNetwork.ethereum:
                return "https://etherscan.io"
            case SupportedNetwork.base:
                return "https://basescan.org"
            case SupportedNetwork.gnosis:
                return "https://gnosisscan.io"
        raise NotImplementedError(f"Network {self} does not have a block explorer")

    @property
    def deployments(self) -> dict[str, DexDeployment]:
        """DEX deployments with subgraph support on this network, keyed by CoinGecko DEX id"""
        return NETWORK_DEPLOYMENTS[self]

    def deployment(self, dex_id: str | None = None) -> DexDeployment:
        """
        Returns the DEX deployment for dex_id.  If dex_id is None, returns the first deployment
        configured for the network.

        :param dex_id: CoinGecko dex identifier
        :return: DexDeployment
        """
        deployments = self.deployments
        if dex_id is None:
            return next(iter(deployments.values()))
        if dex_id not in deployments:
            raise ConfigurationError(
                f"{dex_id} is not supported on {self.pretty()}.  Supported DEXes: {', '.join(deployments.keys())}"
            )
        return deployments[dex_id]

    @classmethod
    def from_coingecko_id(cls, coingecko_id: str) -> "SupportedNetwork | None":
        """Returns the network matching a CoinGecko network id, or None if the network is not supported"""
        for network in cls:
            if network.coingecko_id == coingecko_id:
                return network
        return None


NETWORK_DEPLOYMENTS: dict[SupportedNetwork, dict[str, DexDeployment]] = {
    SupportedNetwork.ethereum: {
        "uniswap_v3": DexDeployment("uniswap_v3", DexVersion.v3, "5zvR82QoaXYFyDEKLZ9t6v9adgnptxYpKpSbxtgVENFV"),
        "uniswap_v2": DexDeployment("uniswap_v2", DexVersion.v2, "A3Np3RQbaBA6oKJgiwDJeo5T3zrYfGHPWFYayMwtNDum"),
    },
    SupportedNetwork.base: {
        "uniswap_v3": DexDeployment("uniswap_v3", DexVersion.v3, "43Hwfi3dJSoGpyas9VwNoDAv55yjgGrPpNSmbQZArzMG"),
    },
    SupportedNetwork.gnosis: {
        "sushiswap_v3": DexDeployment("sushiswap_v3", DexVersion.v3, None),
    },
}


def supported_pool_pairs() -> set[tuple[str, str]]:
    """
    Returns the (coingecko network, dex) combinations that have a configured subgraph deployment.

    >>> sorted(supported_pool_pairs())
    [('base', 'uniswap_v3'), ('eth', 'uniswap_v2'), ('eth', 'uniswap_v3'), ('gno', 'sushiswap_v3')]
    """
    return {
        (network.coingecko_id, dex_id)
        for network, deployments in NETWORK_DEPLOYMENTS.items()
        for dex_id in deployments
    }
