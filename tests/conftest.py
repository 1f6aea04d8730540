"""Shared pytest fixtures for the event-etl test suite."""

from __future__ import annotations

import gzip
import json

import pytest

from event_etl.config import Config
from event_etl.observer import PipelineObserver

REFERENCE_DOC = {
    "ts": 1669976028340,
    "u": "https://www.example.org/ho/ez#w;#n?r?h",
    "e": [{"et": "dl", "n": "digitalData", "u": {"page_name": "store", "store_id": 153}}],
}

REFERENCE_OUTPUT = (
    '[{"timestamp":1669976028340,"url_object":{"domain":"www.example.org",'
    '"path":"/ho/ez","query_object":{},"hash":"#w;#n?r?h"},'
    '"ec":{"et":"dl","n":"digitalData","u":{"page_name":"store","store_id":153}}}]'
)


def write_gz(path, doc) -> None:
    """Gzip *doc* (dict -> compact JSON, str/bytes as-is) into *path*."""
    if isinstance(doc, dict):
        data = json.dumps(doc, separators=(",", ":")).encode("utf-8")
    elif isinstance(doc, str):
        data = doc.encode("utf-8")
    else:
        data = doc
    path.write_bytes(gzip.compress(data))


class RecordingObserver(PipelineObserver):
    """Captures observer callbacks for assertions."""

    def __init__(self):
        self.started: list[tuple[int, int]] = []
        self.succeeded = []
        self.failed = []
        self.completed = []

    def run_started(self, total, skipped):
        self.started.append((total, skipped))

    def file_succeeded(self, result):
        self.succeeded.append(result)

    def file_failed(self, result):
        self.failed.append(result)

    def run_completed(self, summary):
        self.completed.append(summary)


@pytest.fixture()
def reference_doc() -> dict:
    return json.loads(json.dumps(REFERENCE_DOC))


@pytest.fixture()
def dirs(tmp_path):
    """Return (input_dir, output_dir); only the input dir exists."""
    input_dir = tmp_path / "input"
    input_dir.mkdir()
    return input_dir, tmp_path / "output"


@pytest.fixture()
def config(dirs) -> Config:
    input_dir, output_dir = dirs
    return Config(input_dir=str(input_dir), output_dir=str(output_dir), max_workers=4)


@pytest.fixture()
def observer() -> RecordingObserver:
    return RecordingObserver()
