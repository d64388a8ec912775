"""Tests for JWE parsing, header merging and canonical serialization."""

import io
import json
from pathlib import Path

import pytest

from clevis_decrypt.errors import HeaderError, ParseError
from clevis_decrypt.jwe import (
    canonical_dumps,
    merge_header,
    parse_document,
    read_document,
)

FIXTURE = Path(__file__).parent.parent / "fixtures" / "tpm2.jwe"

# base64url of {"alg":"dir","enc":"A256GCM"}
PROTECTED = "eyJhbGciOiJkaXIiLCJlbmMiOiJBMjU2R0NNIn0"
# base64url of {"alg":"dir","enc":"A256GCM","clevis":{"pin":"tang"}}
PROTECTED_TANG = "eyJhbGciOiJkaXIiLCJlbmMiOiJBMjU2R0NNIiwiY2xldmlzIjp7InBpbiI6InRhbmcifX0"


def test_read_document_parses_fixture():
    with open(FIXTURE, "rb") as f:
        document = read_document(f)
    assert document["unprotected"]["clevis"]["pin"] == "tpm2"


@pytest.mark.parametrize(
    "data",
    [b"", b"   \n", b"{not json", b'{"a": 1} trailing', b"\xff\xfe\x00"],
)
def test_parse_document_rejects_invalid_input(data):
    with pytest.raises(ParseError):
        parse_document(data)


def test_parse_document_rejects_nan():
    with pytest.raises(ParseError):
        parse_document(b'{"ciphertext": NaN}')


def test_read_document_reports_unreadable_stream():
    class BrokenStream(io.RawIOBase):
        def read(self, size=-1):
            raise OSError("I/O error")

    with pytest.raises(ParseError, match="Cannot read standard input"):
        read_document(BrokenStream())


def test_merge_header_decodes_protected_header():
    header = merge_header({"protected": PROTECTED, "ciphertext": "x"})
    assert header == {"alg": "dir", "enc": "A256GCM"}


def test_merge_header_accepts_decoded_protected_object():
    header = merge_header({"protected": {"alg": "dir"}, "ciphertext": "x"})
    assert header == {"alg": "dir"}


def test_merge_header_combines_all_sources():
    jwe = {
        "protected": PROTECTED,
        "unprotected": {"jku": "https://example.com"},
        "recipients": [
            {"header": {"kid": "one"}},
            {"encrypted_key": "abc"},
        ],
        "ciphertext": "x",
    }
    header = merge_header(jwe)
    assert header == {
        "alg": "dir",
        "enc": "A256GCM",
        "jku": "https://example.com",
        "kid": "one",
    }


def test_merge_header_recipient_overrides_global():
    jwe = {
        "protected": PROTECTED_TANG,
        "unprotected": {"clevis": {"pin": "tpm2"}},
        "header": {"clevis": {"pin": "sss"}},
        "ciphertext": "x",
    }
    assert merge_header(jwe)["clevis"] == {"pin": "sss"}

    jwe["recipients"] = [{"header": {"clevis": {"pin": "tang"}}}]
    assert merge_header(jwe)["clevis"] == {"pin": "tang"}


def test_merge_header_unprotected_overrides_protected():
    jwe = {
        "protected": PROTECTED_TANG,
        "unprotected": {"clevis": {"pin": "tpm2"}},
        "ciphertext": "x",
    }
    assert merge_header(jwe)["clevis"]["pin"] == "tpm2"


def test_merge_header_without_headers_is_empty():
    assert merge_header({"ciphertext": "x"}) == {}


@pytest.mark.parametrize(
    "jwe",
    [
        ["ciphertext"],
        "eyJhbGciOiJkaXIifQ..iv.ct.tag",
        {"protected": PROTECTED},
        {"protected": "not base64!", "ciphertext": "x"},
        {"protected": "WzEsMl0", "ciphertext": "x"},
        {"protected": 5, "ciphertext": "x"},
        {"unprotected": "nope", "ciphertext": "x"},
        {"header": [], "ciphertext": "x"},
        {"recipients": {}, "ciphertext": "x"},
        {"recipients": ["nope"], "ciphertext": "x"},
        {"recipients": [{"header": 1}], "ciphertext": "x"},
    ],
)
def test_merge_header_rejects_malformed_jwe(jwe):
    with pytest.raises(HeaderError):
        merge_header(jwe)


def test_canonical_dumps_sorts_keys_without_whitespace():
    document = {"tag": "t", "ciphertext": "c", "unprotected": {"b": 1, "a": [1, 2]}}
    assert (
        canonical_dumps(document)
        == b'{"ciphertext":"c","tag":"t","unprotected":{"a":[1,2],"b":1}}'
    )


def test_canonical_dumps_keeps_unicode_and_content():
    with open(FIXTURE, "rb") as f:
        original = json.load(f)
    original["unprotected"]["note"] = "clé"

    encoded = canonical_dumps(original)
    assert "clé".encode("utf-8") in encoded
    assert json.loads(encoded) == original
    assert b" " not in encoded and b"\n" not in encoded
