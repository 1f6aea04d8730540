"""Entry point for the event log ETL job."""

import logging
import sys

from event_etl.config import load_config
from event_etl.errors import ConfigError, ListingError, WriteError
from event_etl.pipeline import EtlPipeline

logger = logging.getLogger("event_etl")


def main(argv: list[str] | None = None) -> int:
    try:
        config = load_config(argv)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )
    logger.info("Starting ETL run: input=%s, output=%s, workers=%d",
                config.input_dir, config.output_dir, config.max_workers)

    try:
        summary = EtlPipeline(config).run()
    except (ListingError, WriteError) as exc:
        logger.error("Aborting run: %s", exc)
        return 1

    print(
        f"Processed {summary.processed}/{summary.total} file(s), "
        f"{summary.failed} failed. See {config.output_dir} for results."
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
