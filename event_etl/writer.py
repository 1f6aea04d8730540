"""Persist normalized records as a compact JSON array, one file per input."""

import json
import logging
import os
import tempfile
from typing import Sequence

from event_etl.errors import WriteError
from event_etl.models import NormalizedRecord

logger = logging.getLogger(__name__)

OUTPUT_SUFFIX = ".json"


def serialize_records(records: Sequence[NormalizedRecord]) -> bytes:
    """Encode *records* as a compact UTF-8 JSON array."""
    payload = [record.to_dict() for record in records]
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


class OutputWriter:
    """Writes ``<output_dir>/<base_name>.json`` via temp file + rename."""

    def __init__(self, output_dir: str):
        self._output_dir = output_dir

    @property
    def output_dir(self) -> str:
        return self._output_dir

    def path_for(self, base_name: str) -> str:
        return os.path.join(self._output_dir, base_name + OUTPUT_SUFFIX)

    def write(self, base_name: str, records: Sequence[NormalizedRecord]) -> str:
        """Serialize and persist *records*. Returns the destination path.

        An existing file with the same name is replaced.
        """
        dest = self.path_for(base_name)
        try:
            data = serialize_records(records)
        except (TypeError, ValueError) as exc:
            raise WriteError(f"{dest}: records are not JSON-serializable: {exc}") from exc

        try:
            os.makedirs(self._output_dir, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._output_dir, suffix=".tmp")
        except OSError as exc:
            raise WriteError(f"{dest}: {exc}") from exc

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp, 0o644)
            os.replace(tmp, dest)
        except OSError as exc:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise WriteError(f"{dest}: {exc}") from exc

        logger.debug("Wrote %d records (%d bytes) to %s", len(records), len(data), dest)
        return dest
