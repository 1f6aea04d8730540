"""Error taxonomy for the ETL pipeline.

Per-file errors are caught by the orchestrator and counted as failures.
ListingError and ConfigError are fatal and abort the run.
"""


class EtlError(Exception):
    """Base error for this package."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class InvalidPathError(EtlError):
    """Raised when a file name does not carry the .json.gz suffix."""


class ReadError(EtlError):
    """Raised when an input file cannot be read from disk."""


class DecompressionError(EtlError):
    """Raised when the file content is not a valid gzip stream."""


class MalformedJsonError(EtlError):
    """Raised when decompressed content is not JSON or lacks ts/u/e."""


class InvalidUrlError(EtlError):
    """Raised when a URL is not a parseable absolute URL."""


class WriteError(EtlError):
    """Raised when an output file cannot be persisted."""


class ListingError(EtlError):
    """Raised when the input directory cannot be listed."""


class ConfigError(EtlError):
    """Raised when configuration values are invalid."""
