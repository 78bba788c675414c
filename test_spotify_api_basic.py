import base64
import hashlib
import os
import tempfile
import unittest
import urllib.parse

# Ensure local imports work when running this file directly.
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
if THIS_DIR not in os.sys.path:
    os.sys.path.insert(0, THIS_DIR)

from spotify_api.auth import (
    VERIFIER_ALPHABET,
    SpotifyPKCEAuth,
    check_spotify_credentials,
    code_challenge_from_verifier,
    generate_pkce_pair,
    generate_verifier,
    parse_callback,
)
from spotify_api.storage import ACCESS_TOKEN_KEY, CODE_VERIFIER_KEY, LocalStorage


CONFIG = {
    "spotify_client_id": "example-client-id",
    "spotify_redirect_uri": "http://127.0.0.1:8888/callback",
    "spotify_scopes": ["user-read-email", "user-read-private"],
}


class TestPKCEHelpers(unittest.TestCase):
    def test_code_challenge_matches_sha256_base64url_no_pad(self):
        verifier = "abc"
        expected = base64.urlsafe_b64encode(hashlib.sha256(verifier.encode("utf-8")).digest()).decode("utf-8").rstrip("=")
        self.assertEqual(code_challenge_from_verifier(verifier), expected)

    def test_challenge_is_deterministic_and_url_safe(self):
        for length in (43, 64, 128):
            verifier = generate_verifier(length)
            first = code_challenge_from_verifier(verifier)
            self.assertEqual(first, code_challenge_from_verifier(verifier))
            for ch in "+/=":
                self.assertNotIn(ch, first)
            # SHA-256 is 32 bytes -> 43 base64url chars without padding.
            self.assertEqual(len(first), 43)

    def test_verifier_length_and_alphabet(self):
        verifier = generate_verifier()
        self.assertEqual(len(verifier), 128)
        self.assertTrue(set(verifier) <= set(VERIFIER_ALPHABET))
        self.assertEqual(len(generate_verifier(43)), 43)

    def test_verifier_length_out_of_range_rejected(self):
        with self.assertRaises(ValueError):
            generate_verifier(42)
        with self.assertRaises(ValueError):
            generate_verifier(129)

    def test_generate_pkce_pair_links_verifier_and_challenge(self):
        pair = generate_pkce_pair()
        self.assertEqual(pair.code_challenge, code_challenge_from_verifier(pair.code_verifier))


class TestAuthorizeUrl(unittest.TestCase):
    def test_authorize_url_has_pkce_params(self):
        auth = SpotifyPKCEAuth(CONFIG)
        url = auth.get_authorize_url(code_challenge="CHALLENGE")

        parsed = urllib.parse.urlparse(url)
        self.assertEqual(f"{parsed.scheme}://{parsed.netloc}{parsed.path}", "https://accounts.spotify.com/authorize")
        qs = urllib.parse.parse_qs(parsed.query)
        self.assertEqual(qs["client_id"], ["example-client-id"])
        self.assertEqual(qs["response_type"], ["code"])
        self.assertEqual(qs["redirect_uri"], ["http://127.0.0.1:8888/callback"])
        self.assertEqual(qs["code_challenge_method"], ["S256"])
        self.assertEqual(qs["code_challenge"], ["CHALLENGE"])
        self.assertEqual(qs["scope"], ["user-read-email user-read-private"])

    def test_missing_client_id_rejected(self):
        auth = SpotifyPKCEAuth({**CONFIG, "spotify_client_id": ""})
        with self.assertRaises(ValueError):
            auth.get_authorize_url(code_challenge="x")

    def test_check_credentials(self):
        self.assertTrue(check_spotify_credentials(CONFIG)["ok"])
        status = check_spotify_credentials({**CONFIG, "spotify_redirect_uri": ""})
        self.assertFalse(status["ok"])
        self.assertIn("spotify_redirect_uri", status["message"])


class TestParseCallback(unittest.TestCase):
    def test_full_redirect_url(self):
        parsed = parse_callback("http://127.0.0.1:8888/callback?code=AAA&state=BBB")
        self.assertEqual(parsed, {"code": "AAA", "state": "BBB"})

    def test_bare_query_strings(self):
        self.assertEqual(parse_callback("?code=abc123"), {"code": "abc123"})
        self.assertEqual(parse_callback("code=abc123"), {"code": "abc123"})
        self.assertEqual(parse_callback("?error=access_denied"), {"error": "access_denied"})

    def test_empty_callback(self):
        self.assertEqual(parse_callback(""), {})
        self.assertEqual(parse_callback("http://127.0.0.1:8888/callback"), {})


class TestLocalStorage(unittest.TestCase):
    def test_persisted_values_survive_new_instance(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "nested", "state.json")
            LocalStorage(path=path).set_item(ACCESS_TOKEN_KEY, "at")

            reopened = LocalStorage(path=path)
            self.assertEqual(reopened.get_item(ACCESS_TOKEN_KEY), "at")
            self.assertIsNone(reopened.get_item(CODE_VERIFIER_KEY))

            reopened.remove_item(ACCESS_TOKEN_KEY)
            self.assertIsNone(LocalStorage(path=path).get_item(ACCESS_TOKEN_KEY))

    def test_corrupt_state_file_reads_as_empty(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "state.json")
            with open(path, "w", encoding="utf-8") as f:
                f.write("{not json")
            storage = LocalStorage(path=path)
            self.assertIsNone(storage.get_item(ACCESS_TOKEN_KEY))
            storage.set_item(ACCESS_TOKEN_KEY, "fresh")
            self.assertEqual(storage.get_item(ACCESS_TOKEN_KEY), "fresh")

    def test_non_persistent_storage_never_writes(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "state.json")
            storage = LocalStorage.from_config({"spotify_state_file": path, "spotify_cache_tokens": False})
            storage.set_item(ACCESS_TOKEN_KEY, "at")
            self.assertEqual(storage.get_item(ACCESS_TOKEN_KEY), "at")
            self.assertFalse(os.path.exists(path))


if __name__ == "__main__":
    unittest.main(verbosity=2)
