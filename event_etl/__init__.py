"""Batch ETL for gzip-compressed JSON event logs."""

__version__ = "1.0.0"
