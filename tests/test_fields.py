import pytest

from zcommon.fields import (
    BIT_TYPE,
    ENUM_TYPE,
    EnumEntry,
    FieldMeta,
    FieldType,
    bit_clear,
    bit_set,
    byte_swap,
    convert_text,
)


def test_byte_swap_words_of_four():
    assert byte_swap(b"\x01\x02\x03\x04", 4) == b"\x04\x03\x02\x01"


def test_byte_swap_words_of_two():
    assert byte_swap(b"\x01\x02\x03\x04", 2) == b"\x02\x01\x04\x03"


def test_byte_swap_uneven_length_unchanged():
    assert byte_swap(b"\x01\x02\x03", 2) == b"\x01\x02\x03"


@pytest.mark.parametrize("width", [2, 4])
def test_byte_swap_round_trip(width):
    data = bytes(range(16))
    assert byte_swap(byte_swap(data, width), width) == data


def test_bit_clear_then_field_is_zero():
    value = 0xFFFF
    cleared = bit_clear(value, 4, 3)
    assert (cleared >> 4) & 0b111 == 0
    assert cleared | (0b111 << 4) == value


@pytest.mark.parametrize("val", [0, 1, 5, 7])
def test_bit_set_stores_field(val):
    result = bit_set(0xFFFF, 4, 3, val)
    assert (result >> 4) & 0b111 == val
    assert result & ~(0b111 << 4) == 0xFFFF & ~(0b111 << 4)


def test_bit_set_overflow_leaves_value():
    assert bit_set(0x1234, 0, 3, 8) == 0x1234


def test_convert_int():
    assert convert_text(FieldType.INT, "42") == 42
    assert convert_text(FieldType.INT, " -7 ") == -7
    assert convert_text(FieldType.INT, "abc") == 0


def test_convert_short_out_of_range_is_zero():
    assert convert_text(FieldType.SHORT, "70000") == 0
    assert convert_text(FieldType.SHORT, "-300") == -300


def test_convert_int8_wraps():
    assert convert_text(FieldType.INT8, "200") == -56


def test_convert_uchar_wraps():
    assert convert_text(FieldType.UCHAR, "300") == 44
    assert convert_text(FieldType.UCHAR, "255") == 255


def test_convert_unsigned_rejects_negative():
    assert convert_text(FieldType.UINT, "-1") == 0
    assert convert_text(FieldType.USHORT, "65535") == 65535


def test_convert_char_takes_first_letter():
    assert convert_text(FieldType.CHAR, "A") == ord("A")
    assert convert_text(FieldType.CHAR, "") == 0


def test_convert_double_and_string():
    assert convert_text(FieldType.DOUBLE, "6.5") == 6.5
    assert convert_text(FieldType.DOUBLE, "x") == 0.0
    assert convert_text(FieldType.STRING, "hello") == "hello"


def test_field_meta_flags():
    meta = FieldMeta("d", FieldType.INT, ENUM_TYPE | BIT_TYPE, 2, 3)
    assert meta.is_enum and meta.is_bit
    plain = FieldMeta("a", FieldType.INT)
    assert not plain.is_enum and not plain.is_bit


def test_wrap_rejects_non_integer():
    with pytest.raises(TypeError):
        FieldType.DOUBLE.wrap(1)


def test_enum_entry_fields():
    entry = EnumEntry(3, "open", 0)
    assert (entry.node, entry.name, entry.value) == (3, "open", 0)