import pytest
from eth_abi import encode

from nethermind.pairscope.decoding.return_data import (
    SLOT0_TYPES,
    ZERO_ADDRESS,
    ZERO_WORD,
    decode_address,
    decode_signed_int,
    decode_slice,
    decode_slot0,
    decode_unsigned_int,
    decode_value,
    decode_word_at,
    is_zero_word,
    slice_value,
)
from nethermind.pairscope.types.decoding import Address, RawWordSlice, SignedInt, UnsignedInt

from ..resources.explorer_responses import SQRT_PRICE_X96, USDC_ADDRESS, word
from ..utils import uint_max


class TestUnsignedIntegers:
    def test_fee_word(self):
        assert decode_unsigned_int(word("0bb8"), 24) == 3000

    def test_short_input_is_left_padded(self):
        assert decode_unsigned_int("0x1", 256) == 1
        assert decode_unsigned_int("0x3B9ACA00", 128) == 1_000_000_000

    @pytest.mark.parametrize("raw", ["", "0x", "0x0", None, ZERO_WORD])
    def test_empty_and_zero_inputs(self, raw):
        assert decode_unsigned_int(raw, 256) == 0

    def test_only_low_bits_are_decoded(self):
        # Upper bits belong to other packed fields
        raw = word("ff" + "00" * 15 + "ab")
        assert decode_unsigned_int(raw, 8) == 0xAB
        assert decode_unsigned_int(raw, 128) == 0xAB

    def test_128_bit_value_uses_low_16_bytes(self):
        raw = "0x" + "11" * 16 + "22" * 16
        assert decode_unsigned_int(raw, 128) == int("22" * 16, 16)

    def test_max_value(self):
        assert decode_unsigned_int("0x" + "f" * 64, 256) == uint_max(256)
        assert decode_unsigned_int("0x" + "f" * 64, 24) == uint_max(24)

    def test_non_hex_input_decodes_to_zero(self):
        assert decode_unsigned_int("0xzzzz", 24) == 0
        assert decode_unsigned_int("not hex at all", 256) == 0

    def test_uppercase_prefix(self):
        assert decode_unsigned_int("0X3c", 24) == 60

    @pytest.mark.parametrize("bit_width", [0, 7, 12, 264, -8])
    def test_invalid_bit_width(self, bit_width):
        with pytest.raises(ValueError):
            decode_unsigned_int(word("01"), bit_width)


class TestSignedIntegers:
    def test_negative_tick(self):
        assert decode_signed_int(word("f" * 58 + "fffffe"), 24) == -2

    def test_positive_tick_spacing(self):
        assert decode_signed_int(word("3c"), 24) == 60

    def test_sign_bit_boundaries(self):
        assert decode_signed_int("0x7fffff", 24) == 2**23 - 1
        assert decode_signed_int("0x800000", 24) == -(2**23)
        assert decode_signed_int("0x" + "f" * 64, 256) == -1

    def test_sign_taken_from_selected_width(self):
        # 0x00fffffe is positive as an int32, but negative as an int24
        assert decode_signed_int("0x00fffffe", 32) == 0xFFFFFE
        assert decode_signed_int("0x00fffffe", 24) == -2

    def test_zero_inputs(self):
        assert decode_signed_int("0x", 24) == 0
        assert decode_signed_int("0xnothex", 24) == 0


class TestAddresses:
    def test_address_is_returned_verbatim(self):
        assert decode_address(word(USDC_ADDRESS)) == USDC_ADDRESS

    def test_address_ignores_upper_bytes(self):
        raw = "0x" + "ff" * 12 + "1f98431c8ad98523631ae4a59f267346ea31f984"
        assert decode_address(raw) == "0x1f98431c8ad98523631ae4a59f267346ea31f984"

    @pytest.mark.parametrize("raw", ["", "0x", "0x0", "0xqq"])
    def test_zero_address(self, raw):
        assert decode_address(raw) == ZERO_ADDRESS

    def test_short_address_is_padded(self):
        assert decode_address("0x1") == "0x" + "0" * 39 + "1"


class TestSlices:
    def test_slice_from_unpadded_body(self):
        raw = "0x" + "11" * 32 + "22" * 32
        assert decode_slice(raw, 62, 4) == "0x1122"
        assert decode_slice(raw, 64, 64) == "0x" + "22" * 32

    def test_out_of_range_slice_is_empty(self):
        assert decode_slice("0xabcd", 10, 4) == "0x"
        assert decode_unsigned_int(decode_slice("0xabcd", 10, 4), 256) == 0

    def test_slice_on_short_input_is_not_padded(self):
        assert decode_slice("0xabc", 0, 64) == "0xabc"

    def test_negative_offsets(self):
        with pytest.raises(ValueError):
            decode_slice(word("01"), -1, 4)

    def test_word_at(self):
        raw = word("01") + word("02")[2:] + word("03")[2:]
        assert decode_unsigned_int(decode_word_at(raw, 1), 256) == 2
        assert decode_word_at(raw, 5) == "0x"

    def test_tagged_slice(self):
        assert slice_value("0xabcdef", 2, 2) == RawWordSlice(start=2, length=2, word="0xcd")


class TestTaggedDecoding:
    def test_decode_value_types(self):
        assert decode_value(word("0bb8"), "uint24") == UnsignedInt(24, 3000)
        assert decode_value(word("fffffe"), "int24") == SignedInt(24, -2)
        assert decode_value(word(USDC_ADDRESS), "address") == Address(USDC_ADDRESS)

    @pytest.mark.parametrize("abi_type", ["bytes32", "bool", "string", "uint"])
    def test_unsupported_types(self, abi_type):
        with pytest.raises(ValueError):
            decode_value(word("01"), abi_type)

    def test_is_zero_word(self):
        assert is_zero_word("0x")
        assert is_zero_word("0x0")
        assert is_zero_word(ZERO_WORD)
        assert not is_zero_word(word("01"))


class TestSlot0:
    def test_full_slot0_return(self):
        raw = "0x" + encode(SLOT0_TYPES, [SQRT_PRICE_X96, -887_220, 3, 10, 20, 0, True]).hex()

        slot_0 = decode_slot0(raw)

        assert slot_0 is not None
        assert slot_0.sqrt_price_x96 == SQRT_PRICE_X96
        assert slot_0.tick == -887_220
        assert slot_0.observation_index == 3
        assert slot_0.observation_cardinality == 10
        assert slot_0.observation_cardinality_next == 20
        assert slot_0.fee_protocol == 0
        assert slot_0.unlocked is True

    def test_sqrt_price_from_first_word(self):
        raw = "0x" + encode(SLOT0_TYPES, [SQRT_PRICE_X96, 100, 0, 1, 1, 0, False]).hex()
        assert decode_unsigned_int(decode_word_at(raw, 0), 160) == SQRT_PRICE_X96

    @pytest.mark.parametrize("raw", ["0x", ZERO_WORD, word("01"), "0xnothex", "0xabc"])
    def test_incomplete_slot0_return(self, raw):
        assert decode_slot0(raw) is None
