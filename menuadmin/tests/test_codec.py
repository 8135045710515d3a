import pytest

from menuadmin.core.session import codec
from menuadmin.core.session.codec import DecodeError

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("value", ["abc123", "", "café ☕ menu", "eyJhbGciOiJIUzI1NiJ9.e30.sig", '{"a": true}'])
def test_decode_reverses_encode(value):
    assert codec.decode(codec.encode(value)) == value


def test_encoded_value_is_not_plaintext_and_cookie_safe():
    encoded = codec.encode("jwt-token?/+=")
    assert "jwt-token" not in encoded
    assert all(ch.isalnum() or ch in "-_=" for ch in encoded)


def test_encode_falls_back_to_raw_value():
    lone_surrogate = "tok\ud800en"
    assert codec.encode(lone_surrogate) == lone_surrogate
    # Must not raise even though the raw value is not decodable.
    codec.decode(lone_surrogate)


def test_decode_returns_input_when_not_decodable():
    assert codec.decode("not base64!!") == "not base64!!"


def test_try_decode_reports_failure():
    result = codec.try_decode("%%%")
    assert not result.ok
    assert isinstance(result.error, DecodeError)
    assert result.unwrap_or("fallback") == "fallback"


def test_try_decode_rejects_invalid_utf8():
    # "_w==" decodes to the single byte 0xff.
    result = codec.try_decode("_w==")
    assert isinstance(result.error, DecodeError)
