# tests/test_token.py
import pytest

from pkg_token import (
    FixedClock,
    InvalidTokenError,
    Key,
    MalformedSignatureError,
    SignedToken,
    TagMismatchError,
    Token,
    TokenExpiredError,
    TokenKind,
    UserAgentMismatchError,
    verify_signature,
)

T = 1_700_000_000
KEY = b"k1"

valid_token = Token(subject="u1", issued_at=T, expires_at=T + 3600, token_id="t-1")
expired_token = Token(subject="u1", issued_at=T - 7200, expires_at=T - 3600, token_id="t-0")


def _flip(text: str, index: int, replacement: str) -> str:
    return text[:index] + replacement + text[index + 1:]


def test_verify_from_signed():
    signed = valid_token.sign(KEY)

    verified = valid_token.verify(KEY, signed.signature(), clock=FixedClock(T))

    assert verified.equal(valid_token)
    assert signed.parse().equal(valid_token)


def test_sign_from_signed_expired():
    signed = expired_token.sign(KEY)

    with pytest.raises(TokenExpiredError):
        valid_token.verify(KEY, signed.signature(), clock=FixedClock(T))

    # expiry never gets in the way of reading the data back
    assert signed.parse().equal(expired_token)


def test_scenario_expiry_and_wrong_key():
    token = Token(subject="u1", issued_at=T, expires_at=T + 3600)
    signature = token.sign("k1").signature()

    assert token.verify("k1", signature, clock=FixedClock(T + 10)).equal(token)

    with pytest.raises(TokenExpiredError):
        token.verify("k1", signature, clock=FixedClock(T + 4000))

    with pytest.raises(TagMismatchError):
        token.verify("k2", signature, clock=FixedClock(T + 10))


def test_expiry_boundary_and_leeway():
    signature = valid_token.sign(KEY).signature()
    at_expiry = FixedClock(valid_token.expires_at)

    assert verify_signature(KEY, signature, clock=at_expiry).equal(valid_token)

    with pytest.raises(TokenExpiredError):
        verify_signature(KEY, signature, clock=at_expiry.shifted(1))

    assert verify_signature(KEY, signature, clock=at_expiry.shifted(30), leeway=30)


def test_tag_is_checked_before_expiry():
    signature = expired_token.sign(KEY).signature()

    with pytest.raises(TagMismatchError):
        verify_signature(b"other", signature, clock=FixedClock(T))


def test_signing_is_deterministic():
    assert valid_token.sign(KEY).signature() == valid_token.sign(Key(KEY)).signature()
    assert valid_token.sign(KEY).signature() != valid_token.sign(b"k2").signature()


def test_signature_does_not_embed_key():
    secret = "super-secret-signing-key"
    signed = valid_token.sign(secret)

    assert secret.encode() not in signed.payload
    assert secret not in signed.signature()


@pytest.mark.parametrize("segment", [0, 1])
def test_tampering_with_any_character_is_detected(segment):
    signature = valid_token.sign(KEY).signature()
    payload_segment, tag_segment = signature.split(".")
    offset = 0 if segment == 0 else len(payload_segment) + 1
    length = len(payload_segment) if segment == 0 else len(tag_segment)

    for index in range(offset, offset + length):
        original = signature[index]
        for replacement in {chr(ord(original) ^ 1), "A" if original != "A" else "B"}:
            tampered = _flip(signature, index, replacement)
            with pytest.raises((TagMismatchError, MalformedSignatureError)):
                verify_signature(KEY, tampered, clock=FixedClock(T))


def test_swapped_tag_is_rejected():
    ours = valid_token.sign(KEY).signature()
    theirs = Token(subject="u2", issued_at=T, expires_at=T + 3600).sign(KEY).signature()

    forged = ours.split(".")[0] + "." + theirs.split(".")[1]
    with pytest.raises(TagMismatchError):
        verify_signature(KEY, forged, clock=FixedClock(T))


@pytest.mark.parametrize("signature", ["", "no-delimiter", "a.b.c", "@@.@@"])
def test_malformed_signature(signature):
    with pytest.raises(MalformedSignatureError):
        verify_signature(KEY, signature, clock=FixedClock(T))


def test_all_verification_failures_share_a_category():
    for error in (MalformedSignatureError, TagMismatchError, TokenExpiredError):
        assert issubclass(error, InvalidTokenError)


def test_parse_unverified_signature_from_wire():
    signature = Token(subject="u9", issued_at=T, expires_at=T + 5, kind=TokenKind.REFRESH).sign(b"whatever").signature()

    parsed = SignedToken.from_signature(signature).parse()

    assert parsed.subject == "u9"
    assert parsed.kind is TokenKind.REFRESH


def test_verify_binds_user_agent():
    token = Token(subject="u1", issued_at=T, expires_at=T + 60, user_agent="Mozilla/5.0")
    signature = token.sign(KEY).signature()

    assert token.verify(KEY, signature, clock=FixedClock(T), expected_user_agent="Mozilla/5.0").equal(token)

    with pytest.raises(UserAgentMismatchError):
        verify_signature(KEY, signature, clock=FixedClock(T), expected_user_agent="curl/8.0")


def test_user_agent_binding_rejects_unbound_tokens():
    signature = valid_token.sign(KEY).signature()

    with pytest.raises(UserAgentMismatchError):
        verify_signature(KEY, signature, clock=FixedClock(T), expected_user_agent="")


def test_expiry_is_reported_before_user_agent_mismatch():
    signature = expired_token.sign(KEY).signature()

    with pytest.raises(TokenExpiredError):
        verify_signature(KEY, signature, clock=FixedClock(T), expected_user_agent="other")
