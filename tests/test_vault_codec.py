"""Tests for the Vault Codec: OpenSSL-compatible AES-256-CBC + PBKDF2."""

import json
import shutil
import subprocess

import pytest

from fleet_vault.vault.codec import VaultCodec, decrypt, encrypt
from fleet_vault.vault.errors import DecryptionFailed, PasswordError

VAULT = json.dumps(
    {
        "_meta": {"description": "test vault"},
        "github_personal": {"token": "ghp_abc123"},
        "twitter": {"api_key": "k", "api_secret": "s"},
    },
    indent=2,
).encode("utf-8")


class _TenThousandIterationCodec(VaultCodec):
    """Same cipher, different KDF iteration count."""

    PBKDF2_ITERATIONS = 10_000


class TestRoundTrip:
    def test_encrypt_decrypt_roundtrip(self):
        blob = encrypt(VAULT, "CorrectHorse")
        assert decrypt(blob, "CorrectHorse") == VAULT

    def test_roundtrip_empty_vault(self):
        blob = encrypt(b"{}", "pw")
        assert decrypt(blob, "pw") == b"{}"

    def test_roundtrip_unicode_values(self):
        plaintext = json.dumps({"jira": {"email": "zoë@example.com"}}, ensure_ascii=False).encode("utf-8")
        assert decrypt(encrypt(plaintext, "pässwörd"), "pässwörd") == plaintext

    def test_salt_is_random(self):
        # Different salt -> different ciphertext
        assert encrypt(VAULT, "same") != encrypt(VAULT, "same")


class TestFormat:
    def test_salted_header(self):
        blob = encrypt(VAULT, "pw")
        assert blob[:8] == b"Salted__"
        assert len(blob) > VaultCodec._HEADER_SIZE
        assert (len(blob) - VaultCodec._HEADER_SIZE) % 16 == 0

    def test_constants(self):
        assert VaultCodec.CIPHER_NAME == "aes-256-cbc"
        assert VaultCodec.PBKDF2_ITERATIONS == 100_000
        assert VaultCodec.FORMAT_VERSION == 1


class TestDecryptionFailures:
    @pytest.mark.parametrize(
        "plaintext",
        [
            VAULT,
            b"{}",
            b'{"a": {"b": "c"}}',
            json.dumps({f"bundle{i}": {"key": "x" * i} for i in range(20)}).encode(),
        ],
    )
    def test_wrong_password_raises(self, plaintext):
        blob = encrypt(plaintext, "right-password")
        with pytest.raises(DecryptionFailed):
            decrypt(blob, "wrong-password")

    def test_iteration_count_mismatch_raises(self):
        blob = _TenThousandIterationCodec.encrypt(VAULT, "pw")
        with pytest.raises(DecryptionFailed):
            VaultCodec.decrypt(blob, "pw")
        # Same parameters still work
        assert _TenThousandIterationCodec.decrypt(blob, "pw") == VAULT

    def test_foreign_format_raises(self):
        with pytest.raises(DecryptionFailed):
            decrypt(b'{"github": {"token": "plain"}}', "pw")

    def test_truncated_raises(self):
        blob = encrypt(VAULT, "pw")
        with pytest.raises(DecryptionFailed):
            decrypt(blob[:-5], "pw")
        with pytest.raises(DecryptionFailed):
            decrypt(blob[:16], "pw")

    def test_non_vault_plaintext_is_rejected(self):
        # Encrypts fine, but is not a mapping of mappings
        blob = encrypt(b"[1, 2, 3]", "pw")
        with pytest.raises(DecryptionFailed):
            decrypt(blob, "pw")

    def test_corrupted_ciphertext_raises(self):
        blob = bytearray(encrypt(VAULT, "pw"))
        blob[-1] ^= 0xFF
        with pytest.raises(DecryptionFailed):
            decrypt(bytes(blob), "pw")


class TestPasswordRequired:
    def test_encrypt_requires_password(self):
        with pytest.raises(PasswordError):
            encrypt(VAULT, "")

    def test_decrypt_requires_password(self):
        blob = encrypt(VAULT, "pw")
        with pytest.raises(PasswordError):
            decrypt(blob, "")


@pytest.mark.skipif(shutil.which("openssl") is None, reason="openssl CLI not installed")
class TestOpenSSLInterop:
    """The artifact must stay readable with stock openssl enc."""

    ARGS = ["-aes-256-cbc", "-pbkdf2", "-iter", "100000"]

    def test_openssl_decrypts_our_vault(self, tmp_path):
        enc = tmp_path / "vault.json.enc"
        enc.write_bytes(encrypt(VAULT, "interop-pass"))
        result = subprocess.run(
            ["openssl", "enc", "-d", *self.ARGS, "-in", str(enc), "-pass", "pass:interop-pass"],
            capture_output=True,
            check=True,
        )
        assert result.stdout == VAULT

    def test_we_decrypt_openssl_vault(self, tmp_path):
        plain = tmp_path / "vault.json"
        enc = tmp_path / "vault.json.enc"
        plain.write_bytes(VAULT)
        subprocess.run(
            ["openssl", "enc", *self.ARGS, "-salt", "-in", str(plain), "-out", str(enc),
             "-pass", "pass:interop-pass"],
            capture_output=True,
            check=True,
        )
        assert decrypt(enc.read_bytes(), "interop-pass") == VAULT
