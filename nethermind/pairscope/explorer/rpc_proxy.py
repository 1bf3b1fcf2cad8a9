import logging

import requests
from pydantic import BaseModel, ValidationError

from nethermind.pairscope.config import ExplorerConfig
from nethermind.pairscope.exceptions import ExplorerError, ExplorerRateLimitError
from nethermind.pairscope.types.explorer import (
    CallFailure,
    CallFailureKind,
    CallResult,
    CallSuccess,
)
from nethermind.pairscope.types.http import HTTPSession
from nethermind.pairscope.utils import is_hex_body, redact_params

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("explorer").getChild("rpc_proxy")

RATE_LIMIT_MARKER = "rate limit"
INVALID_KEY_MARKER = "invalid api key"


class RPCErrorDetail(BaseModel):
    """JSON-RPC error object"""

    code: int | None = None
    message: str = ""


class ExplorerResponse(BaseModel):
    """
    Response envelope of the explorer ``proxy`` module.  The V2 API returns JSON-RPC envelopes, while errors
    raised by the API gateway itself use the legacy ``status/message/result`` envelope.
    """

    jsonrpc: str | None = None
    id: int | str | None = None
    result: str | None = None
    error: RPCErrorDetail | None = None
    status: str | None = None
    message: str | None = None

    def _has_hex_result(self) -> bool:
        return self.result is not None and self.result.startswith("0x") and is_hex_body(self.result[2:])

    def classify(self) -> CallResult:
        """Converts the envelope into a tagged call result"""
        if self.error is not None:
            if RATE_LIMIT_MARKER in self.error.message.lower():
                return CallFailure(CallFailureKind.rate_limit, self.error.message)
            return CallFailure(CallFailureKind.rpc_error, f"RPC Error {self.error.code}: {self.error.message}")

        if self._has_hex_result() and (self.jsonrpc == "2.0" or self.status == "1"):
            if self.result == "0x":
                return CallFailure(CallFailureKind.empty_result, "Call returned no data")
            return CallSuccess(self.result)  # type: ignore[arg-type]

        description = " ".join(text for text in (self.message, self.result) if text)
        match description.lower():
            case text if RATE_LIMIT_MARKER in text:
                return CallFailure(CallFailureKind.rate_limit, description)
            case text if INVALID_KEY_MARKER in text:
                return CallFailure(CallFailureKind.invalid_api_key, description)
            case "":
                return CallFailure(CallFailureKind.malformed, "Explorer response did not contain a result")
            case _:
                return CallFailure(CallFailureKind.rpc_error, description)


def call_read_function(
    contract_address: str,
    selector: str,
    config: ExplorerConfig,
    session: HTTPSession | None = None,
) -> CallResult:
    """
    Executes a no-argument contract read through the explorer ``eth_call`` proxy.  Never raises for upstream
    failures.  Network errors, HTTP errors and error envelopes are returned as :class:`CallFailure`.

    :param contract_address: address of the contract to call
    :param selector: 0x-prefixed 4 byte function selector
    :param config: explorer connection settings
    :param session: requests session.  Defaults to the requests module
    :return: :class:`CallSuccess` carrying the hex return data, or :class:`CallFailure`
    """
    params = {
        "chainid": config.chain_id,
        "module": "proxy",
        "action": "eth_call",
        "to": contract_address,
        "data": selector,
        "tag": "latest",
        "apikey": config.api_key,
    }
    logger.debug(f"Calling {config.api_base_url}?{redact_params(params)}")

    http = session or requests
    try:
        response = http.get(config.api_base_url, params=params, timeout=config.timeout)
    except requests.exceptions.RequestException as exc:
        logger.warning(f"Could not reach explorer API at {config.api_base_url}: {exc}")
        return CallFailure(CallFailureKind.transport, str(exc))

    match response.status_code:
        case 200:
            pass
        case 429:
            return CallFailure(CallFailureKind.rate_limit, "HTTP 429 Too Many Requests")
        case _:
            return CallFailure(
                CallFailureKind.http_error,
                f"Unexpected Response Status Code ({response.status_code}) from explorer API",
            )

    try:
        envelope = ExplorerResponse.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.debug(f"Malformed explorer response for selector {selector}: {exc}")
        return CallFailure(CallFailureKind.malformed, "Explorer returned a malformed response")

    result = envelope.classify()
    if isinstance(result, CallFailure):
        logger.warning(f"Call {selector} to {contract_address} failed ({result.kind.value}): {result.message}")
    else:
        logger.debug(f"Call {selector} to {contract_address} returned {result.payload}")
    return result


def unwrap_call_result(result: CallResult) -> str:
    """
    Returns the payload of a successful call, raising for failures

    :raises ExplorerRateLimitError: if the explorer enforced rate limits
    :raises ExplorerError: for all other failures
    """
    match result:
        case CallSuccess(payload=payload):
            return payload
        case CallFailure(kind=CallFailureKind.rate_limit, message=message):
            raise ExplorerRateLimitError(f"Rate limit reached. Please wait a moment and try again. ({message})")
        case CallFailure(kind=kind, message=message):
            raise ExplorerError(f"Contract call failed ({kind.value}): {message}")
    raise ExplorerError(f"Unexpected call result {result!r}")
