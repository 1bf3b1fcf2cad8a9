"""
Decoding of raw return data from no-argument contract read calls.

Return data is a 0x-prefixed, big-endian hex string padded to 32 byte words.  Every decoder in this module is
total over string inputs: empty, short or malformed return data degrades to the zero value of the requested type
instead of raising.  This lets callers substitute the zero word for a failed call and decode it like any other
result.
"""
import logging
import re

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError
from eth_typing import HexStr
from eth_utils import remove_0x_prefix

from nethermind.pairscope.types.decoding import (
    Address,
    DecodedValue,
    RawWordSlice,
    SignedInt,
    Slot0,
    UnsignedInt,
)
from nethermind.pairscope.utils import is_hex_body

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("pairscope").getChild("decoding")

WORD_NIBBLES = 64
ADDRESS_NIBBLES = 40
ZERO_WORD = "0x" + "0" * WORD_NIBBLES
ZERO_ADDRESS = "0x" + "0" * ADDRESS_NIBBLES

SLOT0_TYPES = ["uint160", "int24", "uint16", "uint16", "uint16", "uint8", "bool"]

_ABI_INT_PATTERN = re.compile(r"^(u?)int(\d+)$")


def _validate_bit_width(bit_width: int) -> None:
    if bit_width % 8 != 0 or not 8 <= bit_width <= 256:
        raise ValueError(f"Unsupported bit width {bit_width}.  Bit width must be a multiple of 8 between 8 and 256")


def _hex_body(raw: str | None) -> str:
    if not raw:
        return ""
    return remove_0x_prefix(HexStr(raw))


def _low_nibbles(raw: str | None, nibbles: int) -> str | None:
    """
    Left pads the hex body of raw to a full word, and returns the last ``nibbles`` characters.  Returns None if the
    selected characters are not valid hex.
    """
    padded = _hex_body(raw).rjust(WORD_NIBBLES, "0")
    selected = padded[-nibbles:]
    if not is_hex_body(selected):
        logger.debug(f"Non-hex characters in return data {raw!r}.  Decoding as zero")
        return None
    return selected


def is_zero_word(raw: str | None) -> bool:
    """
    Returns True if raw return data contains no non-zero digits.  ``""``, ``"0x"`` and ``"0x0"`` are all zero words

    :param raw: hex return data
    :return:
    """
    return set(_hex_body(raw)) <= {"0"}


def decode_unsigned_int(raw: str | None, bit_width: int) -> int:
    """
    Decodes the low ``bit_width`` bits of a return word as an unsigned integer.

    >>> decode_unsigned_int("0x0000000000000000000000000000000000000000000000000000000000000bb8", 24)
    3000
    >>> decode_unsigned_int("0x", 24)
    0

    :param raw: hex return data.  Shorter inputs are left padded to 32 bytes
    :param bit_width: width of the integer type in bits
    :return: decoded integer.  Malformed return data decodes to 0
    """
    _validate_bit_width(bit_width)
    selected = _low_nibbles(raw, bit_width // 4)
    if selected is None:
        return 0
    return int(selected, 16)


def decode_signed_int(raw: str | None, bit_width: int) -> int:
    """
    Decodes the low ``bit_width`` bits of a return word as a two's complement signed integer.

    >>> decode_signed_int("0xfffffe", 24)
    -2
    >>> decode_signed_int("0x3c", 24)
    60

    :param raw: hex return data
    :param bit_width: width of the integer type in bits
    :return: decoded integer.  Malformed return data decodes to 0
    """
    value = decode_unsigned_int(raw, bit_width)
    if value >= 2 ** (bit_width - 1):
        return value - 2**bit_width
    return value


def decode_address(raw: str | None) -> str:
    """
    Decodes the low 20 bytes of a return word as an address.  Address characters are returned exactly as they
    appear in the return data, and are not checksummed.

    :param raw: hex return data
    :return: 0x-prefixed 40 character address.  Malformed return data decodes to the zero address
    """
    selected = _low_nibbles(raw, ADDRESS_NIBBLES)
    if selected is None:
        return ZERO_ADDRESS
    return "0x" + selected


def decode_slice(raw: str | None, start_nibble: int, length_nibbles: int) -> str:
    """
    Extracts a sub-word from packed return data.  The slice is taken from the hex body as returned, without
    padding, and is itself a raw word that can be passed to the other decoders.

    >>> decode_slice("0x" + "11" * 32 + "22" * 32, 64, 4)
    '0x2222'

    :param raw: hex return data
    :param start_nibble: offset of the first hex character, counted from the left of the body
    :param length_nibbles: number of hex characters to extract
    :return: 0x-prefixed slice.  Slices past the end of the data are truncated, and may be ``"0x"``
    """
    if start_nibble < 0 or length_nibbles < 0:
        raise ValueError("Slice offsets must be non-negative")
    body = _hex_body(raw)
    return "0x" + body[start_nibble : start_nibble + length_nibbles]


def decode_word_at(raw: str | None, word_index: int) -> str:
    """Returns the word_index-th 32 byte word of multi-word return data"""
    return decode_slice(raw, word_index * WORD_NIBBLES, WORD_NIBBLES)


def decode_value(raw: str | None, abi_type: str) -> DecodedValue:
    """
    Decodes return data into a tagged value according to an elementary ABI type.

    >>> decode_value("0x3c", "int24")
    SignedInt(bit_width=24, value=60)

    :param raw: hex return data
    :param abi_type: ``address``, ``uint<N>`` or ``int<N>``
    :return: :class:`UnsignedInt`, :class:`SignedInt` or :class:`Address`
    """
    if abi_type == "address":
        return Address(decode_address(raw))

    type_match = _ABI_INT_PATTERN.match(abi_type)
    if type_match is None:
        raise ValueError(f"Cannot decode return data as {abi_type}.  Supported types are address, uintN and intN")

    unsigned, bit_width = type_match.group(1) == "u", int(type_match.group(2))
    if unsigned:
        return UnsignedInt(bit_width, decode_unsigned_int(raw, bit_width))
    return SignedInt(bit_width, decode_signed_int(raw, bit_width))


def slice_value(raw: str | None, start_nibble: int, length_nibbles: int) -> RawWordSlice:
    """Tagged version of :func:`decode_slice`"""
    return RawWordSlice(start_nibble, length_nibbles, decode_slice(raw, start_nibble, length_nibbles))


def decode_slot0(raw: str | None) -> Slot0 | None:
    """
    Strictly decodes the full return of the Uniswap V3 ``slot0()`` function.  Unlike the other decoders, this
    requires all seven return words to be present.  Insufficient or invalid data is logged and returns None.

    :param raw: hex return data of ``slot0()``
    :return: :class:`Slot0` or None
    """
    try:
        data = bytes.fromhex(_hex_body(raw))
    except ValueError:
        logger.debug(f"slot0 return data is not valid hex: {raw!r}")
        return None

    try:
        decoded = eth_abi_decode(SLOT0_TYPES, data)
    except DecodingError as exc:
        logger.debug(f"Error decoding slot0 return data {data.hex()}: {exc}")
        return None
    except OverflowError:
        logger.debug(f"Overflow error while decoding slot0 return data {data.hex()}")
        return None

    return Slot0(*decoded)
