"""
Tests for scalar value text conversions.
"""
import pytest

from rcserver.settings import codec


class TestBoolConversion:

    def test_bool_to_text(self):
        assert codec.bool_to_text(True) == "true"
        assert codec.bool_to_text(False) == "false"

    def test_text_to_bool_accepts_written_forms(self):
        assert codec.text_to_bool(codec.bool_to_text(True)) is True
        assert codec.text_to_bool(codec.bool_to_text(False)) is False

    @pytest.mark.parametrize("text", ["TRUE", "True", " true ", "1", "yes", "on"])
    def test_text_to_bool_loose_true(self, text):
        assert codec.text_to_bool(text) is True

    @pytest.mark.parametrize("text", ["", "0", "no", "maybe", None, "truthy"])
    def test_text_to_bool_defaults_false(self, text):
        assert codec.text_to_bool(text) is False


class TestNumberConversion:

    def test_float_uses_two_decimals(self):
        assert codec.float_to_text(1.0) == "1.00"
        assert codec.float_to_text(0.5) == "0.50"
        assert codec.float_to_text(2.345) in ("2.35", "2.34")

    def test_text_to_float(self):
        assert codec.text_to_float("1.50") == pytest.approx(1.5)
        assert codec.text_to_float(" 3 ") == pytest.approx(3.0)

    def test_unparseable_float_is_zero(self):
        assert codec.text_to_float("fast") == 0.0
        assert codec.text_to_float("") == 0.0
        assert codec.text_to_float(None) == 0.0

    def test_int_round_trip_text(self):
        assert codec.int_to_text(60) == "60"
        assert codec.text_to_int("60") == 60
        assert codec.text_to_int("-5") == -5

    def test_unparseable_int_is_zero(self):
        assert codec.text_to_int("sixty") == 0
        assert codec.text_to_int("60.5") == 0
        assert codec.text_to_int("") == 0


def test_text_codec_keeps_leading_zeros():
    assert codec.TEXT.decode("0042") == "0042"
    assert codec.TEXT.encode("0042") == "0042"
    assert codec.TEXT.decode(None) == ""
