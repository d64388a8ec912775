"""Reading, header merging and canonical serialization of JWE documents.

Only the header metadata of a JWE is interpreted here; the cryptographic
members are carried through untouched.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import IO, Any, Dict, Iterator, Tuple

from .errors import HeaderError, ParseError

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_document(data: bytes) -> Any:
    """Parse ``data`` as a single UTF-8 JSON document."""
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Input is not valid UTF-8: {exc.reason}") from exc

    if not text.strip():
        raise ParseError("No JWE provided on standard input")

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as exc:
        raise ParseError(f"Input is not valid JSON: {exc}") from exc


def read_document(stream: IO[bytes]) -> Any:
    """Read ``stream`` to completion and parse it."""
    try:
        data = stream.read()
    except OSError as exc:
        raise ParseError(f"Cannot read standard input: {exc}") from exc
    return parse_document(data)


def canonical_dumps(document: Any) -> bytes:
    """Serialize with sorted keys and no insignificant whitespace."""
    return json.dumps(
        document,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def _b64url_json(value: str) -> Any:
    stripped = value.rstrip("=")
    try:
        raw = base64.b64decode(
            stripped + "=" * (-len(stripped) % 4), altchars=b"-_", validate=True
        )
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise HeaderError(f"Invalid protected header: {exc}") from exc


def _header_sources(jwe: Dict[str, Any]) -> Iterator[Tuple[str, Dict[str, Any]]]:
    """Yield header objects from least to most specific."""

    protected = jwe.get("protected")
    if protected is not None:
        if isinstance(protected, str):
            protected = _b64url_json(protected)
        if not isinstance(protected, dict):
            raise HeaderError("Protected header is not a JSON object")
        yield "protected", protected

    for name in ("unprotected", "header"):
        value = jwe.get(name)
        if value is None:
            continue
        if not isinstance(value, dict):
            raise HeaderError(f"JWE member {name!r} is not a JSON object")
        yield name, value

    recipients = jwe.get("recipients")
    if recipients is None:
        return
    if not isinstance(recipients, list):
        raise HeaderError("JWE member 'recipients' is not a list")
    for index, recipient in enumerate(recipients):
        if not isinstance(recipient, dict):
            raise HeaderError(f"JWE recipient {index} is not a JSON object")
        header = recipient.get("header")
        if header is None:
            continue
        if not isinstance(header, dict):
            raise HeaderError(f"JWE recipient {index} header is not a JSON object")
        yield f"recipients[{index}]", header


def merge_header(jwe: Any) -> Dict[str, Any]:
    """Combine every header of ``jwe`` into one flat mapping.

    Sources are applied in order protected, unprotected, flattened ``header``,
    then each recipient ``header``; a later source replaces earlier top-level
    keys.

    Raises:
        HeaderError: If ``jwe`` is not shaped like a JWE.
    """

    if not isinstance(jwe, dict):
        raise HeaderError("Error merging JWE header: document is not a JSON object")
    if "ciphertext" not in jwe:
        raise HeaderError("Error merging JWE header: missing ciphertext")

    merged: Dict[str, Any] = {}
    for name, header in _header_sources(jwe):
        logger.debug("Merging %s header keys: %s", name, sorted(header))
        merged.update(header)
    return merged


__all__ = ["canonical_dumps", "merge_header", "parse_document", "read_document"]
