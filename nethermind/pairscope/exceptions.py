class ContractReadError(Exception):
    """

    Raised when pool contract information cannot be retrieved at all.  Individual call failures are
    recovered by the :class:`~nethermind.pairscope.explorer.pool_reader.PoolContractReader`, so this is
    only raised when the explorer is unreachable, or when every contract read fails.

    """


class ExplorerError(Exception):
    """

    Raised when issues occur with the block explorer API

    """


class ExplorerRateLimitError(ExplorerError):
    """Raised when call-rate limits are enforced by the block explorer"""


class SubgraphError(Exception):
    """

    Raised when the subgraph gateway returns errors, unexpected data, or cannot be reached

    """


class PoolNotFoundError(SubgraphError):
    """Raised when the subgraph does not index a pool or pair at the requested address"""


class CoinGeckoError(Exception):
    """

    Raised when the CoinGecko on-chain API returns an error response or cannot be reached.  Troubleshooting steps:

    * Verify the API key is a Pro API key.  Demo keys are rejected by pro-api.coingecko.com
    * The megafilter endpoint requires a higher tier plan than the trending pools endpoint

    """


class CredentialError(Exception):
    """

    Raised when the local credential cache cannot be read or written, or when an unknown credential
    name is used

    """


class ConfigurationError(Exception):
    """
    Raised when a network, DEX deployment or required API key is missing from the configuration
    """
