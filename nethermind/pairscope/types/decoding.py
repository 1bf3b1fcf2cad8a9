from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class UnsignedInt:
    """Unsigned integer decoded from the low ``bit_width`` bits of a return word"""

    bit_width: int
    value: int


@dataclass(frozen=True, slots=True)
class SignedInt:
    """Two's complement integer decoded from the low ``bit_width`` bits of a return word"""

    bit_width: int
    value: int


@dataclass(frozen=True, slots=True)
class Address:
    """20 byte address, as a 0x-prefixed hex string"""

    value: str


@dataclass(frozen=True, slots=True)
class RawWordSlice:
    """Sub-word of a packed return value, suitable for a further decode"""

    start: int
    length: int
    word: str


DecodedValue = UnsignedInt | SignedInt | Address | RawWordSlice


@dataclass(frozen=True, slots=True)
class Slot0:
    """Decoded return of the Uniswap V3 ``slot0()`` read function"""

    sqrt_price_x96: int
    """
        Square root of the token_1/token_0 exchange rate as a Q64.96 fixed point number
    """
    tick: int
    observation_index: int
    observation_cardinality: int
    observation_cardinality_next: int
    fee_protocol: int
    unlocked: bool
