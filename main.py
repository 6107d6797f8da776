"""Entry point for the TSDB metric file importer."""

import logging
import sys

from tsdb_importer.config import load_config
from tsdb_importer.importer import Importer
from tsdb_importer.shutdown import ShutdownController


def main(argv=None):
    try:
        config = load_config(argv)
    except ValueError as exc:
        logging.basicConfig(level=logging.ERROR)
        logging.getLogger(__name__).error("Invalid configuration: %s", exc)
        sys.exit(2)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger = logging.getLogger(__name__)

    controller = ShutdownController()
    controller.install_signal_handlers()

    logger.info(
        "Starting importer: dir=%s, pattern=%s, interval=%.1fs, workers=%d",
        config.watch_dir,
        config.file_pattern,
        config.scan_interval,
        config.workers,
    )
    Importer(config, controller).run()


if __name__ == "__main__":
    main()
