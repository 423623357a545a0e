"""Unit tests for app.core.tokens: issue/verify, expiry, secret and algorithm pinning, token purpose."""

import time
import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from app.core.exceptions import ExpiredTokenError, InvalidTokenError
from app.core.tokens import ClaimSet, TokenCodec, TokenConfig, TokenType
from tests.support import TEST_SECRET, make_codec


def _claims(**overrides: object) -> dict:
    now = datetime.now(UTC)
    claims = {
        "sub": "7",
        "role": "customer",
        "iat": now,
        "exp": now + timedelta(hours=1),
        "jti": "abc123",
        "type": "access",
    }
    claims.update(overrides)
    return {k: v for k, v in claims.items() if v is not None}


def _assert_window(case: unittest.TestCase, claims: ClaimSet, window: timedelta) -> None:
    """Claims are whole seconds, so the signed window may round up by up to one second."""
    lifetime = claims.expires_at - claims.issued_at
    case.assertGreaterEqual(lifetime, window)
    case.assertLessEqual(lifetime, window + timedelta(seconds=1))


class TestRoundTrip(unittest.TestCase):
    """verify(issue(...)) returns the subject and role that went in."""

    def test_subject_and_role_survive_for_various_windows(self) -> None:
        codec = make_codec()
        for window in (timedelta(seconds=5), timedelta(minutes=30), timedelta(days=7)):
            with self.subTest(window=window):
                claims = codec.verify(codec.issue(42, "admin", validity_window=window))
                self.assertEqual(claims.subject_id, 42)
                self.assertEqual(claims.role_name, "admin")
                _assert_window(self, claims, window)
                self.assertEqual(claims.token_type, TokenType.ACCESS)

    def test_default_access_window_is_seven_days(self) -> None:
        codec = make_codec()
        claims = codec.verify(codec.issue(1, "customer"))
        _assert_window(self, claims, timedelta(days=7))

    def test_each_token_gets_a_unique_id(self) -> None:
        codec = make_codec()
        a = codec.verify(codec.issue(1, "customer"))
        b = codec.verify(codec.issue(1, "customer"))
        self.assertNotEqual(a.token_id, b.token_id)

    def test_extra_claims_are_returned(self) -> None:
        codec = make_codec()
        token = codec.issue(
            3, None, token_type=TokenType.RESET_PASSWORD, extra={"email": "a@example.com"}
        )
        claims = codec.verify(token, expected_type=TokenType.RESET_PASSWORD)
        self.assertEqual(claims.extra, {"email": "a@example.com"})
        self.assertIsNone(claims.role_name)

    def test_non_positive_window_is_rejected(self) -> None:
        codec = make_codec()
        with self.assertRaises(ValueError):
            codec.issue(1, "customer", validity_window=timedelta(0))
        with self.assertRaises(ValueError):
            codec.issue(1, "customer", validity_window=timedelta(seconds=-5))


class TestShortLivedTokens(unittest.TestCase):
    """Reset/verification tokens use the short window and never pass as session tokens."""

    def test_reset_token_uses_short_window(self) -> None:
        codec = make_codec(short_lived_window=timedelta(hours=2))
        token = codec.issue(5, None, token_type=TokenType.RESET_PASSWORD)
        claims = codec.verify(token, expected_type=TokenType.RESET_PASSWORD)
        _assert_window(self, claims, timedelta(hours=2))

    def test_reset_token_is_not_an_access_token(self) -> None:
        codec = make_codec()
        token = codec.issue(5, "customer", token_type=TokenType.EMAIL_VERIFICATION)
        with self.assertRaises(InvalidTokenError):
            codec.verify(token)

    def test_access_token_is_not_a_reset_token(self) -> None:
        codec = make_codec()
        with self.assertRaises(InvalidTokenError):
            codec.verify(codec.issue(5, "customer"), expected_type=TokenType.RESET_PASSWORD)


class TestExpiry(unittest.TestCase):
    def test_one_second_token_is_expired_after_two_seconds(self) -> None:
        codec = make_codec()
        token = codec.issue(1, "customer", validity_window=timedelta(seconds=1))
        time.sleep(2.1)
        with self.assertRaises(ExpiredTokenError):
            codec.verify(token)

    def test_expired_is_reported_distinctly_from_invalid(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=2)
        token = jwt.encode(
            _claims(iat=past, exp=past + timedelta(hours=1)), TEST_SECRET, algorithm="HS256"
        )
        with self.assertRaises(ExpiredTokenError) as ctx:
            make_codec().verify(token)
        self.assertNotIsInstance(ctx.exception, InvalidTokenError)
        self.assertEqual(ctx.exception.code, "TOKEN_EXPIRED")


class TestSubSecondIssueTime(unittest.TestCase):
    """Whole-second claims never shorten a token below its window."""

    def _raw_claims(self, token: str) -> dict:
        return jwt.decode(token, options={"verify_signature": False})

    def test_expiry_rounds_up_from_the_issue_instant(self) -> None:
        codec = make_codec()
        with patch("app.core.tokens.time.time", return_value=1_000_000.95):
            token = codec.issue(1, "customer", validity_window=timedelta(seconds=1))
        claims = self._raw_claims(token)
        self.assertEqual(claims["iat"], 1_000_000)
        self.assertEqual(claims["exp"], 1_000_002)

    def test_fractional_window_rounds_up(self) -> None:
        codec = make_codec()
        with patch("app.core.tokens.time.time", return_value=1_000_000.25):
            token = codec.issue(1, "customer", validity_window=timedelta(milliseconds=1500))
        claims = self._raw_claims(token)
        self.assertEqual(claims["iat"], 1_000_000)
        self.assertEqual(claims["exp"], 1_000_002)

    def test_sub_second_windows_verify_right_after_issue(self) -> None:
        codec = make_codec()
        for window in (timedelta(milliseconds=1), timedelta(milliseconds=500), timedelta(milliseconds=1500)):
            with self.subTest(window=window):
                for _ in range(20):
                    self.assertEqual(codec.verify(codec.issue(4, "customer", validity_window=window)).subject_id, 4)

    def test_token_issued_late_in_a_second_lasts_its_window(self) -> None:
        codec = make_codec()
        fraction = time.time() % 1
        if fraction < 0.9:
            time.sleep(0.9 - fraction)
        token = codec.issue(1, "customer", validity_window=timedelta(seconds=1))
        time.sleep(0.2)
        self.assertEqual(codec.verify(token).subject_id, 1)

    def test_fractional_window_holds_until_it_ends(self) -> None:
        codec = make_codec()
        token = codec.issue(1, "customer", validity_window=timedelta(milliseconds=1500))
        time.sleep(1.2)
        self.assertEqual(codec.verify(token).subject_id, 1)


class TestRejection(unittest.TestCase):
    """Tokens that must never verify."""

    def test_different_secret(self) -> None:
        token = make_codec(secret="someone-else").issue(1, "admin")
        with self.assertRaises(InvalidTokenError):
            make_codec().verify(token)

    def test_different_hmac_algorithm_with_same_secret(self) -> None:
        token = jwt.encode(_claims(), TEST_SECRET, algorithm="HS512")
        with self.assertRaises(InvalidTokenError):
            make_codec(algorithm="HS256").verify(token)

    def test_unsigned_alg_none_token(self) -> None:
        token = jwt.encode(_claims(role="admin"), None, algorithm="none")
        with self.assertRaises(InvalidTokenError):
            make_codec().verify(token)

    def test_garbage_and_empty_strings(self) -> None:
        codec = make_codec()
        for token in ("", "not-a-token", "a.b.c"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidTokenError):
                    codec.verify(token)

    def test_tampered_payload(self) -> None:
        codec = make_codec()
        header, _payload, signature = codec.issue(1, "customer").split(".")
        forged_payload = jwt.encode(_claims(role="admin"), TEST_SECRET).split(".")[1]
        with self.assertRaises(InvalidTokenError):
            codec.verify(".".join([header, forged_payload, signature]))

    def test_missing_required_claim(self) -> None:
        token = jwt.encode(_claims(jti=None), TEST_SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            make_codec().verify(token)

    def test_non_numeric_subject(self) -> None:
        token = jwt.encode(_claims(sub="alice"), TEST_SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            make_codec().verify(token)

    def test_missing_type_claim(self) -> None:
        token = jwt.encode(_claims(type=None), TEST_SECRET, algorithm="HS256")
        with self.assertRaises(InvalidTokenError):
            make_codec().verify(token)


class TestTokenConfig(unittest.TestCase):
    def test_empty_secret_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TokenConfig(secret="")

    def test_from_settings(self) -> None:
        from app.core.config import Settings

        settings = Settings(
            JWT_SECRET="s3cret", JWT_ALGORITHM="hs384", JWT_EXPIRE_MINUTES=90, JWT_SHORT_LIVED_MINUTES=30
        )
        config = TokenConfig.from_settings(settings)
        self.assertEqual(config.secret, "s3cret")
        self.assertEqual(config.algorithm, "HS384")
        self.assertEqual(config.default_window, timedelta(minutes=90))
        self.assertEqual(config.short_lived_window, timedelta(minutes=30))
        codec = TokenCodec(config)
        self.assertEqual(codec.verify(codec.issue(9, "manager")).subject_id, 9)


if __name__ == "__main__":
    unittest.main()
