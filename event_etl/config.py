"""Configuration — frozen dataclass loaded from YAML, env vars, and CLI args."""

from __future__ import annotations

import logging
import os
import sys
from argparse import ArgumentParser
from dataclasses import dataclass, field, replace

import yaml

from event_etl.errors import ConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _default_workers() -> int:
    # Same cap ThreadPoolExecutor applies when max_workers is omitted.
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass(frozen=True)
class Config:
    input_dir: str = "./input"
    output_dir: str = "./output"
    max_workers: int = field(default_factory=_default_workers)
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_workers < 1:
            raise ConfigError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self.log_level!r}")

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level.upper())

    @classmethod
    def from_dict(cls, d: dict) -> Config:
        """Build a Config from a mapping, falling back to defaults for missing keys."""
        kwargs = {}
        for key in ("input_dir", "output_dir", "log_level"):
            if d.get(key) is not None:
                kwargs[key] = str(d[key])
        if d.get("max_workers") is not None:
            kwargs["max_workers"] = _to_int("max_workers", d["max_workers"])
        return cls(**kwargs)


def _to_int(name: str, value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def load_yaml(path: str) -> dict:
    """Load the ``etl`` section (or a flat mapping) from a YAML file.

    A missing file yields an empty dict so defaults apply.
    """
    try:
        with open(path, "r") as f:
            doc = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc

    if doc is None:
        return {}
    if not isinstance(doc, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    section = doc.get("etl", doc)
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: 'etl' section must be a mapping")
    return section


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="event-etl",
        description="Normalize gzip-compressed JSON event logs into per-event JSON files.",
    )
    parser.add_argument("--config", help="YAML config file (env: CONFIG_PATH)")
    parser.add_argument("--input-dir", help="Directory holding *.json.gz files (default: ./input)")
    parser.add_argument("--output-dir", help="Directory for *.json results (default: ./output)")
    parser.add_argument("--workers", type=int, dest="max_workers", help="Worker pool size")
    parser.add_argument("--log-level", choices=_LOG_LEVELS, help="Logging level (default: INFO)")
    return parser


def load_config(argv: list[str] | None = None) -> Config:
    """Build Config from defaults <- YAML <- env vars <- CLI args (highest priority)."""
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv)

    config_path = args.config or os.environ.get("CONFIG_PATH")
    config = Config.from_dict(load_yaml(config_path)) if config_path else Config()

    env = {
        "input_dir": os.environ.get("ETL_INPUT_DIR"),
        "output_dir": os.environ.get("ETL_OUTPUT_DIR"),
        "max_workers": os.environ.get("ETL_MAX_WORKERS"),
        "log_level": os.environ.get("ETL_LOG_LEVEL"),
    }
    cli = {
        "input_dir": args.input_dir,
        "output_dir": args.output_dir,
        "max_workers": args.max_workers,
        "log_level": args.log_level,
    }

    for overrides in (env, cli):
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "max_workers" in changes:
            changes["max_workers"] = _to_int("max_workers", changes["max_workers"])
        if changes:
            config = replace(config, **changes)

    return config
