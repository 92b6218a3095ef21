import pytest

from request_planner.encoders import ValueEncoder
from request_planner.errors import UnknownEncoderError


class TestDefaultEncoding:
    def test_scalars(self):
        enc = ValueEncoder()
        assert enc.encode("abc") == "abc"
        assert enc.encode(42) == "42"
        assert enc.encode(1.5) == "1.5"
        assert enc.encode(True) == "true"
        assert enc.encode(False) == "false"

    def test_none_stays_none(self):
        assert ValueEncoder().encode(None) is None

    def test_collections_become_json(self):
        enc = ValueEncoder()
        assert enc.encode({"a": [1, 2]}) == '{"a":[1,2]}'
        assert enc.encode([1, "x"]) == '[1,"x"]'


class TestNamedEncoders:
    def test_json_encoder_quotes_strings(self):
        assert ValueEncoder().encode("abc", {"encoder": "json"}) == '"abc"'

    def test_base64(self):
        assert ValueEncoder().encode("hello", {"encoder": "base64"}) == "aGVsbG8="

    def test_unknown_encoder(self):
        with pytest.raises(UnknownEncoderError):
            ValueEncoder().encode("x", {"encoder": "rot13"})

    def test_register_custom(self):
        enc = ValueEncoder()
        enc.register("upper", lambda v: None if v is None else str(v).upper())
        assert enc.encode("abc", {"encoder": "upper"}) == "ABC"

    def test_constructor_overrides(self):
        enc = ValueEncoder({"simple": lambda v: "x"})
        assert enc.encode(1) == "x"
