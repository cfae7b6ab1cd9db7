import io

import pytest

from xvtools.fmt import format, fprintf, printf


def test_plain_text_passes_through():
    assert format("hello world\n") == "hello world\n"


def test_signed_decimal_round_trip():
    for n in (0, 7, -123, 2**31 - 1, -(2**31)):
        assert int(format("%d", n)) == n


def test_decimal_wraps_to_32_bits():
    assert int(format("%d", 2**31)) == -(2**31)


def test_long_prints_low_32_bits_unsigned():
    assert format("%l", 2**32 + 7) == "7"


def test_hex_round_trip_and_uppercase():
    for n in (0, 1, 0xBEEF, 0x7FFFFFFF):
        text = format("%x", n)
        assert int(text, 16) == n
        assert text == text.upper()


def test_hex_negative_is_unsigned():
    assert format("%x", -1) == "FFFFFFFF"


def test_pointer_is_zero_padded():
    text = format("%p", 0xABC)
    assert text.startswith("0x")
    assert len(text) == 18
    assert int(text[2:], 16) == 0xABC


def test_string_and_null():
    assert format("[%s]", "abc") == "[abc]"
    assert format("%s", None) == "(null)"


def test_char_from_int_and_str():
    assert format("%c", 65) == "A"
    assert format("%c%c", "x", "y") == "xy"


def test_percent_and_unknown_sequences():
    assert format("100%%") == "100%"
    assert format("%q") == "%q"
    assert format("abc%") == "abc"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        format("%d %d", 1)


def test_fprintf_writes_to_stream():
    buf = io.StringIO()
    fprintf(buf, "%s=%d\n", "n", 5)
    assert buf.getvalue() == "n=5\n"


def test_printf_writes_to_stdout(capsys):
    printf("init: %s\n", "starting sh")
    assert capsys.readouterr().out == "init: starting sh\n"