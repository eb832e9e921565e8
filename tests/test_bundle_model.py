"""Tests for the Bundle Model: parsing, readiness and serialization."""

import json

import pytest

from fleet_vault.vault.bundle import (
    META_BUNDLE,
    Vault,
    is_placeholder,
    is_ready,
    not_ready_reason,
    parse,
    serialize,
)
from fleet_vault.vault.errors import ParseError


class TestParse:
    def test_parses_mapping_of_mappings(self):
        vault = parse(b'{"_meta": {"version": 2}, "twitter": {"api_key": "x", "api_secret": ""}}')
        assert vault.names() == ["twitter"]
        assert vault.get("twitter") == {"api_key": "x", "api_secret": ""}
        assert vault.to_dict()["_meta"] == {"version": 2}

    def test_accepts_str(self):
        assert parse('{"a": {}}').names() == ["a"]

    @pytest.mark.parametrize(
        "raw",
        [
            b"",
            b"not json",
            b"[]",
            b'"string"',
            b'{"twitter": ["api_key"]}',
            b'{"twitter": "x"}',
            b'{"twitter": {"api_key": 42}}',
            b'{"twitter": {"nested": {"a": "b"}}}',
            b"\xff\xfe\x00garbage",
        ],
    )
    def test_rejects_malformed(self, raw):
        with pytest.raises(ParseError):
            parse(raw)

    def test_meta_must_still_be_object(self):
        with pytest.raises(ParseError):
            parse(b'{"_meta": "v1"}')


class TestVault:
    def test_meta_excluded_from_enumeration(self):
        vault = Vault({"_meta": {"a": "b"}, "github_personal": {"token": "t"}})
        assert vault.names() == ["github_personal"]
        assert META_BUNDLE not in vault
        assert vault.get(META_BUNDLE) is None
        assert len(vault) == 1

    def test_preserves_document_order(self):
        vault = parse(b'{"zeta": {}, "alpha": {}, "_meta": {}, "mid": {}}')
        assert vault.names() == ["zeta", "alpha", "mid"]

    def test_repr_hides_values(self):
        vault = Vault({"github_personal": {"token": "ghp_secret"}})
        assert "ghp_secret" not in repr(vault)
        assert "github_personal" in repr(vault)


class TestSerialize:
    def test_serialize_parse_roundtrip(self):
        vault = Vault({"_meta": {"note": "x"}, "jira": {"url": "https://jira", "api_token": "t"}})
        assert parse(serialize(vault)) == vault

    def test_serialize_is_stable(self):
        vault = Vault({"b": {"y": "1"}, "a": {"x": "2"}})
        raw = serialize(vault)
        assert serialize(parse(raw)) == raw
        assert raw.endswith(b"\n")
        assert json.loads(raw) == {"b": {"y": "1"}, "a": {"x": "2"}}


class TestReadiness:
    def test_placeholder_detection(self):
        assert is_placeholder("PASTE_ME")
        assert is_placeholder("PASTE_YOUR_TOKEN")
        assert not is_placeholder("ghp_abc123")
        assert not is_placeholder("")
        assert not is_placeholder(None)

    def test_ready_bundle(self):
        assert is_ready({"token": "ghp_abc123"}, "token")

    def test_placeholder_primary_not_ready(self):
        assert not is_ready({"token": "PASTE_ME"}, "token")
        assert not_ready_reason({"token": "PASTE_ME"}, "token") == "placeholder"

    def test_missing_bundle_not_ready(self):
        assert not is_ready(None, "token")
        assert not_ready_reason(None, "token") == "not in vault"

    def test_missing_or_empty_primary_not_ready(self):
        assert not_ready_reason({}, "token") == "missing token"
        assert not_ready_reason({"token": ""}, "token") == "missing token"

    def test_only_primary_decides(self):
        # Non-primary placeholders are the merger's concern
        assert is_ready({"api_key": "k", "api_secret": "PASTE"}, "api_key")
