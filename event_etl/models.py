"""Record models: raw input, decomposed address, and normalized output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawRecord:
    """One decoded input document: {ts, u, e}."""

    ts: int
    u: str
    e: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict) -> RawRecord:
        # JSON Schema "integer" admits 1.0; emit a true int.
        return cls(ts=int(d["ts"]), u=d["u"], e=list(d["e"]))


@dataclass(frozen=True)
class Address:
    domain: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    fragment: str = ""

    def to_dict(self) -> dict:
        """Wire form consumed downstream: domain, path, query_object, hash."""
        return {
            "domain": self.domain,
            "path": self.path,
            "query_object": dict(self.query),
            "hash": self.fragment,
        }


@dataclass(frozen=True)
class NormalizedRecord:
    timestamp: int
    address: Address
    event: Any

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "url_object": self.address.to_dict(),
            "ec": self.event,
        }
