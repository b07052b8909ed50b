# tests/test_domain.py
import json

import pytest

from pkg_token.domain.codec import CanonicalCodec
from pkg_token.domain.clock import FixedClock
from pkg_token.domain.constants import TokenKind
from pkg_token.domain.entities import SignedToken, Token
from pkg_token.domain.exceptions import (
    EncodingError,
    InvalidTokenError,
    MalformedPayloadError,
    MalformedSignatureError,
)
from pkg_token.domain.signer import HMACSigner
from pkg_token.domain.value_objects import Key
from pkg_token.domain.wire import decode_signature, encode_signature

T = 1_700_000_000


def test_key_value_object():
    assert Key("k1").value == b"k1"
    assert Key(b"\x00\xff").value == b"\x00\xff"
    assert Key.coerce("k1") == Key(b"k1")
    assert "k1" not in repr(Key("k1"))

    with pytest.raises(EncodingError):
        Key("")
    with pytest.raises(EncodingError):
        Key(123)


def test_token_rejects_expiry_before_issue():
    with pytest.raises(EncodingError):
        Token(subject="u1", issued_at=T, expires_at=T - 1)

    # zero-length validity is allowed
    Token(subject="u1", issued_at=T, expires_at=T)


def test_token_equal():
    a = Token(subject="u1", issued_at=T, expires_at=T + 3600)
    assert a.equal(Token(subject="u1", issued_at=T, expires_at=T + 3600))
    assert not a.equal(Token(subject="u1", issued_at=T, expires_at=T + 3601))
    assert not a.equal(Token(subject="u1", issued_at=T, expires_at=T + 3600, kind=TokenKind.REFRESH))
    assert not a.equal(Token(subject="u1", issued_at=T, expires_at=T + 3600, token_id="x"))
    assert not a.equal("u1")


def test_token_equal_is_type_strict():
    a = Token(subject="u1", issued_at=1, expires_at=2)

    assert a == Token(subject="u1", issued_at=True, expires_at=2)
    assert not a.equal(Token(subject="u1", issued_at=True, expires_at=2))
    assert not a.equal(Token(subject="u1", issued_at=1, expires_at=2.0))
    assert a.equal(Token(subject="u1", issued_at=1, expires_at=2))


def test_token_issue_uses_clock_and_kind_ttl():
    clock = FixedClock(T)

    access = Token.issue("u1", clock=clock)
    assert access.issued_at == T
    assert access.expires_at == T + 600
    assert access.kind is TokenKind.ACCESS
    assert access.token_id

    refresh = Token.issue("u1", kind=TokenKind.REFRESH, ttl_seconds=60, user_agent="cli", clock=clock)
    assert refresh.expires_at == T + 60
    assert refresh.user_agent == "cli"
    assert refresh.token_id != access.token_id


def test_codec_is_canonical():
    token = Token(subject="u1", issued_at=1000, expires_at=4600)
    assert CanonicalCodec().encode(token) == (
        b'{"expires_at":4600,"issued_at":1000,"kind":"access",'
        b'"subject":"u1","token_id":null,"user_agent":null}'
    )


def test_codec_round_trip_with_all_fields():
    codec = CanonicalCodec()
    token = Token(
        subject="usér",
        issued_at=0,
        expires_at=10,
        kind=TokenKind.REFRESH,
        token_id="abc",
        user_agent="Mozilla/5.0",
    )
    payload = codec.encode(token)
    assert payload.isascii()
    assert codec.decode(payload) == token


@pytest.mark.parametrize(
    "token",
    [
        Token(subject="", issued_at=T, expires_at=T),
        Token(subject="u1", issued_at=-5, expires_at=T),
        Token(subject="u1", issued_at=True, expires_at=T),
        Token(subject="u1", issued_at=T, expires_at=float(T + 1)),
        Token(subject="u1", issued_at=T, expires_at=T, kind="access"),
        Token(subject="u1", issued_at=T, expires_at=T, user_agent=42),
    ],
)
def test_codec_rejects_invalid_fields(token):
    with pytest.raises(EncodingError):
        CanonicalCodec().encode(token)


def _payload(**overrides):
    document = {
        "subject": "u1",
        "issued_at": T,
        "expires_at": T + 10,
        "kind": "access",
        "token_id": None,
        "user_agent": None,
    }
    document.update(overrides)
    return json.dumps(document).encode()


@pytest.mark.parametrize(
    "payload",
    [
        b"",
        b"\xff\xfe",
        b"not json",
        b"[1, 2, 3]",
        _payload(issued_at="1700000000"),
        _payload(expires_at=-1),
        _payload(expires_at=1.5),
        _payload(kind="bearer"),
        _payload(kind=["access"]),
        _payload(subject=7),
        _payload(token_id=1),
        _payload(extra="field"),
        _payload(expires_at=T - 1),
        json.dumps({"subject": "u1", "issued_at": T}).encode(),
        pytest.param(b"[" * 100000 + b"]" * 100000, id="deeply-nested"),
    ],
)
def test_codec_rejects_malformed_payloads(payload):
    with pytest.raises(MalformedPayloadError):
        CanonicalCodec().decode(payload)


def test_malformed_payload_is_an_invalid_token():
    assert issubclass(MalformedPayloadError, InvalidTokenError)


def test_signer_is_deterministic_and_keyed():
    signer = HMACSigner()
    tag = signer.tag(b"k1", b"payload")

    assert len(tag) == 32
    assert signer.tag(b"k1", b"payload") == tag
    assert signer.tag(b"k2", b"payload") != tag
    assert signer.tag(b"k1", b"payloaD") != tag

    assert signer.verify(b"k1", b"payload", tag)
    assert not signer.verify(b"k2", b"payload", tag)
    assert not signer.verify(b"k1", b"payload", tag[:-1])


def test_wire_format():
    signature = encode_signature(b"\xfb\xff", b"\x00")
    assert signature == "-_8.AA"
    assert decode_signature(signature) == (b"\xfb\xff", b"\x00")


@pytest.mark.parametrize(
    "signature",
    [
        "",
        "abc",
        "a.b.c",
        ".AA",
        "AA.",
        "A+/.AA",
        "AA==.AA",
        "A.AA",        # impossible base64 length
        "AB.AA",       # non-zero trailing bits
        None,
        b"AA.AA",
    ],
)
def test_wire_format_rejects_malformed(signature):
    with pytest.raises(MalformedSignatureError):
        decode_signature(signature)


def test_signed_token_from_signature_round_trip():
    signed = Token(subject="u1", issued_at=T, expires_at=T + 1).sign("k1")
    rebuilt = SignedToken.from_signature(signed.signature())

    assert rebuilt == signed
    assert rebuilt.parse() == signed.parse()


def test_signed_token_parse_reports_garbage_payload():
    with pytest.raises(MalformedPayloadError):
        SignedToken(payload=b"garbage", tag=b"\x00" * 32).parse()


def test_parse_deeply_nested_payload_from_wire():
    signature = encode_signature(b"[" * 100000 + b"]" * 100000, b"\x00" * 32)

    with pytest.raises(MalformedPayloadError):
        SignedToken.from_signature(signature).parse()
