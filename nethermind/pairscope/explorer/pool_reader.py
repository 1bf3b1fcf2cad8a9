import logging
import time
from typing import Callable

from eth_utils import is_hex_address

from nethermind.pairscope.config import ExplorerConfig
from nethermind.pairscope.decoding.return_data import (
    ZERO_WORD,
    decode_address,
    decode_signed_int,
    decode_slot0,
    decode_unsigned_int,
    decode_word_at,
)
from nethermind.pairscope.exceptions import ContractReadError
from nethermind.pairscope.explorer.rpc_proxy import call_read_function
from nethermind.pairscope.types.explorer import (
    CallFailure,
    CallFailureKind,
    CallResult,
    CallSuccess,
    ContractCallResult,
)
from nethermind.pairscope.types.http import HTTPSession

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("explorer").getChild("pool_reader")

# Selectors for the no-argument read functions of a Uniswap V3 Pool
FUNCTION_SELECTORS: dict[str, str] = {
    "fee": "0xddca3f43",  # fee()
    "token0": "0x0dfe1681",  # token0()
    "token1": "0xd21220a7",  # token1()
    "liquidity": "0x1a686502",  # liquidity()
    "tickSpacing": "0xd0c93a7c",  # tickSpacing()
    "slot0": "0x3850c7bd",  # slot0()
}

# Pool fees are denominated in hundredths of a basis point
FEE_PERCENTAGE_DIVISOR = 10_000


def _is_transport_failure(result: CallResult) -> bool:
    return isinstance(result, CallFailure) and result.kind == CallFailureKind.transport


class PoolContractReader:
    """
    Reads pool parameters from chain through the block explorer's ``eth_call`` proxy.

    Calls are issued one at a time, with ``config.call_delay`` seconds between calls to stay under the
    explorer's per-second call limit.  A failed call does not stop the remaining calls.  The zero word is decoded
    in its place, and the field is reported in :attr:`ContractCallResult.unavailable`.

    The explorer is treated as unreachable when the first two calls both fail at the transport level, and the
    remaining calls are skipped.  A single dropped connection is zero filled like any other failed call.
    """

    config: ExplorerConfig
    session: HTTPSession | None

    def __init__(
        self,
        config: ExplorerConfig,
        session: HTTPSession | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.session = session
        self._sleep = sleep

    def _read_all(self, pool_address: str) -> dict[str, CallResult]:
        results: dict[str, CallResult] = {}
        for call_index, (function_name, selector) in enumerate(FUNCTION_SELECTORS.items()):
            if call_index > 0 and self.config.call_delay > 0:
                self._sleep(self.config.call_delay)

            result = call_read_function(pool_address, selector, self.config, self.session)
            results[function_name] = result

            explorer_unreachable = call_index == 1 and all(map(_is_transport_failure, results.values()))
            if explorer_unreachable and isinstance(result, CallFailure):
                raise ContractReadError(
                    f"Unable to retrieve contract information.  Explorer API at {self.config.api_base_url} "
                    f"is unreachable: {result.message}"
                )
        return results

    def fetch(self, pool_address: str) -> ContractCallResult:
        """
        Queries fee, token0, token1, liquidity, tickSpacing and slot0 from a pool contract

        :param pool_address: 0x-prefixed pool contract address
        :return: :class:`ContractCallResult`
        :raises ContractReadError: if the first two calls can not reach the explorer, or if every call fails
        """
        if not is_hex_address(pool_address):
            raise ContractReadError(f"Invalid pool address: {pool_address}")

        logger.info(f"Fetching contract info for pool {pool_address} on chain {self.config.chain_id}")
        results = self._read_all(pool_address)

        unavailable = tuple(name for name, result in results.items() if isinstance(result, CallFailure))
        if len(unavailable) == len(FUNCTION_SELECTORS):
            messages = {result.message for result in results.values() if isinstance(result, CallFailure)}
            raise ContractReadError(
                f"Unable to retrieve contract information.  All contract calls failed: {'; '.join(sorted(messages))}"
            )
        if unavailable:
            logger.warning(f"Contract calls failed for {list(unavailable)}.  Defaulting to zero values")

        raw = {
            name: result.payload if isinstance(result, CallSuccess) else ZERO_WORD for name, result in results.items()
        }

        fee = decode_unsigned_int(raw["fee"], 24)
        sqrt_price_word = decode_word_at(raw["slot0"], 0)

        if (slot_0 := decode_slot0(raw["slot0"])) is not None:
            logger.debug(f"Current Tick: {slot_0.tick}\tObservation Index: {slot_0.observation_index}")

        contract_info = ContractCallResult(
            fee=str(fee),
            fee_percentage=fee / FEE_PERCENTAGE_DIVISOR,
            token_0=decode_address(raw["token0"]),
            token_1=decode_address(raw["token1"]),
            liquidity=str(decode_unsigned_int(raw["liquidity"], 128)),
            tick_spacing=str(decode_signed_int(raw["tickSpacing"], 24)),
            sqrt_price_x96=str(decode_unsigned_int(sqrt_price_word, 160)),
            unavailable=unavailable,
        )

        logger.info("Queried Pool Contract ------------------")
        logger.info(f"\tToken 0:  {contract_info.token_0}\tToken 1:  {contract_info.token_1}")
        logger.info(f"\tPool Fee: {contract_info.fee_percentage}%\tTick Spacing: {contract_info.tick_spacing}")
        logger.info(f"\tLiquidity: {contract_info.liquidity}\tSqrt Price: {contract_info.sqrt_price_x96}")

        return contract_info


def fetch_pool_contract_info(
    pool_address: str,
    config: ExplorerConfig,
    session: HTTPSession | None = None,
) -> ContractCallResult:
    """
    Fetches pool contract info with a new :class:`PoolContractReader`

    :param pool_address: 0x-prefixed pool contract address
    :param config: explorer connection settings
    :param session: requests session
    :return: :class:`ContractCallResult`
    """
    return PoolContractReader(config, session).fetch(pool_address)
