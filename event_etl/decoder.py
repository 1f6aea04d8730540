"""Read, gunzip, and parse one .json.gz input file into a RawRecord."""

import gzip
import json
import logging
import os
import zlib

import jsonschema

from event_etl.errors import (
    DecompressionError,
    InvalidPathError,
    MalformedJsonError,
    ReadError,
)
from event_etl.models import RawRecord

logger = logging.getLogger(__name__)

REQUIRED_SUFFIX = ".json.gz"

# Only the fields the transform consumes are checked; anything else is ignored.
RAW_RECORD_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["ts", "u", "e"],
    "properties": {
        "ts": {"type": "integer"},
        "u": {"type": "string"},
        "e": {"type": "array"},
    },
}

_validator = jsonschema.Draft202012Validator(RAW_RECORD_SCHEMA)


def has_required_suffix(name: str) -> bool:
    """True if *name* ends with the exact, case-sensitive ``.json.gz`` suffix."""
    return name.endswith(REQUIRED_SUFFIX)


def strip_suffix(name: str) -> str:
    """Return *name* without its ``.json.gz`` suffix."""
    if not has_required_suffix(name):
        raise InvalidPathError(f"Expected a file ending in {REQUIRED_SUFFIX}: {name!r}")
    return name[: -len(REQUIRED_SUFFIX)]


def _reject_constant(name: str):
    raise MalformedJsonError(f"non-standard JSON constant {name}")


def _decompress(data: bytes, path: str) -> bytes:
    if not data:
        raise DecompressionError(f"{path}: file is empty")
    try:
        return gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(f"{path}: invalid gzip stream: {exc}") from exc


def _parse(payload: bytes, path: str) -> dict:
    try:
        doc = json.loads(payload.decode("utf-8"), parse_constant=_reject_constant)
    except UnicodeDecodeError as exc:
        raise MalformedJsonError(f"{path}: content is not UTF-8 text: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise MalformedJsonError(f"{path}: invalid JSON: {exc}") from exc
    except MalformedJsonError as exc:
        raise MalformedJsonError(f"{path}: invalid JSON: {exc}") from exc

    errors = sorted(_validator.iter_errors(doc), key=lambda e: e.message)
    if errors:
        messages = "; ".join(e.message for e in errors)
        raise MalformedJsonError(f"{path}: unexpected record shape: {messages}")
    return doc


def decode_file(path) -> RawRecord:
    """Decode the gzip-compressed JSON document at *path*.

    The whole file is read into memory before decompression.

    Raises:
        InvalidPathError: the name lacks the .json.gz suffix (storage untouched).
        ReadError: the file cannot be read.
        DecompressionError: the bytes are not a valid gzip stream.
        MalformedJsonError: invalid JSON, or ts/u/e missing or mistyped.
    """
    path = os.fspath(path)
    if not has_required_suffix(path):
        raise InvalidPathError(f"Expected a file ending in {REQUIRED_SUFFIX}: {path!r}")

    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as exc:
        raise ReadError(f"{path}: {exc}") from exc

    payload = _decompress(data, path)
    logger.debug("Decompressed %s: %d -> %d bytes", path, len(data), len(payload))
    return RawRecord.from_dict(_parse(payload, path))
