from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# pylint: disable=invalid-name


class CallFailureKind(Enum):
    """Reasons an explorer ``eth_call`` proxy request can fail"""

    rate_limit = "rate_limit"
    invalid_api_key = "invalid_api_key"
    rpc_error = "rpc_error"
    empty_result = "empty_result"
    http_error = "http_error"
    malformed = "malformed"
    transport = "transport"


@dataclass(frozen=True, slots=True)
class CallSuccess:
    """Successful contract read.  payload is the 0x-prefixed hex return data"""

    payload: str


@dataclass(frozen=True, slots=True)
class CallFailure:
    """Failed contract read"""

    kind: CallFailureKind
    message: str


CallResult = CallSuccess | CallFailure


@dataclass(frozen=True)
class ContractCallResult:
    """
    Pool contract information assembled from six independent contract reads.

    Fields whose read failed hold the decoded zero word, and are listed in ``unavailable``
    """

    fee: str
    """
        Raw uint24 pool fee in hundredths of a basis point, as a decimal string
    """
    fee_percentage: float
    """
        Pool fee as a percentage.  A raw fee of 3000 is 0.3%
    """
    token_0: str
    token_1: str
    liquidity: str
    """
        Active in-range liquidity as a decimal string.  Can exceed the range of a 64 bit integer
    """
    tick_spacing: str
    sqrt_price_x96: str
    unavailable: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Returns the result with camelCase keys, matching the contract function names"""
        return {
            "fee": self.fee,
            "feePercentage": self.fee_percentage,
            "token0": self.token_0,
            "token1": self.token_1,
            "liquidity": self.liquidity,
            "tickSpacing": self.tick_spacing,
            "sqrtPriceX96": self.sqrt_price_x96,
        }
