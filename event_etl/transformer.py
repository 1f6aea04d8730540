"""Fan a raw record out into one normalized record per embedded event."""

from event_etl.models import NormalizedRecord, RawRecord
from event_etl.url import decompose_url


def transform_record(raw: RawRecord) -> list[NormalizedRecord]:
    """Expand *raw* into normalized records, preserving the order of ``raw.e``.

    The URL is decomposed once and the resulting Address is shared by every
    output record. An invalid URL fails the whole record (InvalidUrlError).
    """
    address = decompose_url(raw.u)
    return [
        NormalizedRecord(timestamp=raw.ts, address=address, event=event)
        for event in raw.e
    ]
