import math
import time
import unittest

from jose import jwt

from vas_gateway.auth.issuer import TokenIssuer
from vas_gateway.auth.verifier import TokenVerifier, extract_token
from vas_gateway.core.errors import ErrorKind, GatewayError
from vas_gateway.models.AccessToken import IssuedToken, VerifiedToken

SECRET = "unit-secret"


def flip(text: str, index: int) -> str:
    replacement = "A" if text[index] != "A" else "B"
    return text[:index] + replacement + text[index + 1:]


class TestTokenIssuer(unittest.TestCase):

    def setUp(self):
        self.issuer = TokenIssuer(secret=SECRET, lifetime_seconds=3600, expires_in=3600, clock=lambda: 1_700_000_000.7)

    def issue(self, issuer=None, **overrides):
        values = dict(client_id="A", app="airtime", base_url="https://airtime.example", session_id="s1")
        values.update(overrides)
        return (issuer or self.issuer).issue(**values)

    def test_issue_builds_claims(self):
        issued = self.issue(user_id="u1")
        self.assertIsInstance(issued, IssuedToken)
        self.assertEqual(issued.expires_in, 3600)
        self.assertEqual(issued.base_url, "https://airtime.example")
        self.assertEqual(issued.app, "airtime")

        claims = jwt.get_unverified_claims(issued.token)
        self.assertEqual(claims["clientId"], "A")
        self.assertEqual(claims["sessionID"], "s1")
        self.assertEqual(claims["userId"], "u1")
        self.assertEqual(claims["issuedAt"], 1_700_000_000)
        self.assertEqual(claims["iat"], 1_700_000_000)
        self.assertEqual(claims["exp"], 1_700_003_600)

    def test_missing_user_id_is_null(self):
        claims = jwt.get_unverified_claims(self.issue().token)
        self.assertIn("userId", claims)
        self.assertIsNone(claims["userId"])

    def test_expires_in_is_reported_separately(self):
        issuer = TokenIssuer(secret=SECRET, lifetime_seconds=60, expires_in=900)
        issued = self.issue(issuer)
        claims = jwt.get_unverified_claims(issued.token)
        self.assertEqual(issued.expires_in, 900)
        self.assertEqual(claims["exp"] - claims["iat"], 60)

    def test_missing_secret_is_reported(self):
        result = self.issue(TokenIssuer(secret=None, lifetime_seconds=60, expires_in=60))
        self.assertIsInstance(result, GatewayError)
        self.assertEqual(result.kind, ErrorKind.SERVER_CONFIG)


class TestTokenVerifier(unittest.TestCase):

    def setUp(self):
        self.issuer = TokenIssuer(secret=SECRET, lifetime_seconds=3600, expires_in=3600)
        self.verifier = TokenVerifier(secret=SECRET)

    def issue(self, issuer=None, **overrides):
        values = dict(client_id="A", app="bill-payments", base_url="https://bills.example", session_id="s1")
        values.update(overrides)
        return (issuer or self.issuer).issue(**values)

    def test_round_trip(self):
        for user_id in (None, "user-7"):
            with self.subTest(user_id=user_id):
                issued = self.issue(user_id=user_id)
                result = self.verifier.verify(issued.token)
                self.assertIsInstance(result, VerifiedToken)
                claims = result.claims
                self.assertEqual(claims.clientId, "A")
                self.assertEqual(claims.app, "bill-payments")
                self.assertEqual(claims.sessionID, "s1")
                self.assertEqual(claims.userId, user_id)
                self.assertEqual(claims, issued.claims)
                self.assertIn("exp", result.payload)

    def test_token_required(self):
        for token in (None, ""):
            self.assertEqual(self.verifier.verify(token).kind, ErrorKind.TOKEN_REQUIRED)

    def test_missing_secret(self):
        issued = self.issue()
        result = TokenVerifier(secret=None).verify(issued.token)
        self.assertEqual(result.kind, ErrorKind.SERVER_CONFIG)

    def test_expired_token(self):
        # Issued an hour ago with a one second lifetime
        issuer = TokenIssuer(secret=SECRET, lifetime_seconds=1, expires_in=1, clock=lambda: time.time() - 3600)
        result = self.verifier.verify(self.issue(issuer).token)
        self.assertEqual(result.kind, ErrorKind.TOKEN_EXPIRED)
        self.assertEqual(result.status_code, 401)

    def test_expired_token_with_bad_signature_is_invalid(self):
        issuer = TokenIssuer(secret="other-secret", lifetime_seconds=1, expires_in=1, clock=lambda: time.time() - 3600)
        result = self.verifier.verify(self.issue(issuer).token)
        self.assertEqual(result.kind, ErrorKind.TOKEN_INVALID)

    def test_tampered_payload(self):
        header, payload, signature = self.issue().token.split(".")
        for index in (0, len(payload) // 2, len(payload) - 1):
            with self.subTest(index=index):
                token = ".".join([header, flip(payload, index), signature])
                self.assertEqual(self.verifier.verify(token).kind, ErrorKind.TOKEN_INVALID)

    def test_tampered_signature(self):
        header, payload, signature = self.issue().token.split(".")
        token = ".".join([header, payload, flip(signature, 0)])
        self.assertEqual(self.verifier.verify(token).kind, ErrorKind.TOKEN_INVALID)

    def test_wrong_secret(self):
        issued = self.issue()
        self.assertEqual(TokenVerifier(secret="other").verify(issued.token).kind, ErrorKind.TOKEN_INVALID)

    def test_malformed(self):
        for token in ("not-a-token", "a.b.c", "...."):
            with self.subTest(token=token):
                self.assertEqual(self.verifier.verify(token).kind, ErrorKind.TOKEN_INVALID)

    def test_expires_at_exp(self):
        # Issued in the future so only the verifier clock decides
        issued_at = math.floor(time.time()) + 1000
        issuer = TokenIssuer(secret=SECRET, lifetime_seconds=60, expires_in=60, clock=lambda: issued_at)
        token = self.issue(issuer).token
        exp = issued_at + 60

        just_before = TokenVerifier(secret=SECRET, clock=lambda: exp - 0.5)
        self.assertIsInstance(just_before.verify(token), VerifiedToken)

        at_exp = TokenVerifier(secret=SECRET, clock=lambda: exp)
        self.assertEqual(at_exp.verify(token).kind, ErrorKind.TOKEN_EXPIRED)

        after_exp = TokenVerifier(secret=SECRET, clock=lambda: exp + 1)
        self.assertEqual(after_exp.verify(token).kind, ErrorKind.TOKEN_EXPIRED)

    def test_other_algorithm_rejected(self):
        token = jwt.encode({"clientId": "A"}, SECRET, algorithm="HS512")
        self.assertEqual(self.verifier.verify(token).kind, ErrorKind.TOKEN_INVALID)


class TestExtractToken(unittest.TestCase):

    def test_header(self):
        self.assertEqual(extract_token("Bearer abc", None), "abc")

    def test_query(self):
        self.assertEqual(extract_token(None, "abc"), "abc")

    def test_header_wins(self):
        self.assertEqual(extract_token("Bearer from-header", "from-query"), "from-header")

    def test_non_bearer_header_is_ignored(self):
        self.assertEqual(extract_token("Basic abc", "from-query"), "from-query")
        self.assertIsNone(extract_token("Basic abc", None))

    def test_nothing(self):
        self.assertIsNone(extract_token(None, None))
        self.assertIsNone(extract_token("Bearer ", ""))


if __name__ == "__main__":
    unittest.main()
