"""Configuration module — frozen dataclass loaded from env vars and CLI args."""

import argparse
import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ImporterConfig:
    tsdb_url: str = "http://localhost:4242/api/put?details"
    scan_interval: float = 1.0
    batch_size: int = 100
    workers: int = 1
    watch_dir: str = "."
    file_pattern: str = "*.gz"
    queue_size: int = 10000
    read_buffer_size: int = 4096
    request_timeout: Optional[float] = None
    log_level: str = "INFO"

    def validate(self) -> None:
        """Raise ValueError if any setting cannot drive the pipeline."""
        if not self.tsdb_url:
            raise ValueError("tsdb_url must not be empty")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")
        if self.scan_interval <= 0:
            raise ValueError(
                f"scan_interval must be positive, got {self.scan_interval}"
            )
        if self.queue_size <= 0:
            raise ValueError(f"queue_size must be positive, got {self.queue_size}")
        if self.read_buffer_size <= 0:
            raise ValueError(
                f"read_buffer_size must be positive, got {self.read_buffer_size}"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip().lower() in ("", "none"):
        return None
    return float(value)


def load_config(argv: Optional[list[str]] = None) -> ImporterConfig:
    """Build ImporterConfig from defaults <- env vars <- CLI args (highest priority).

    Pass argv for testability; when None, argparse reads sys.argv.
    """
    env = {
        "tsdb_url": os.environ.get("TSDB_URL", ImporterConfig.tsdb_url),
        "scan_interval": float(
            os.environ.get("SCAN_INTERVAL", ImporterConfig.scan_interval)
        ),
        "batch_size": int(os.environ.get("BATCH_SIZE", ImporterConfig.batch_size)),
        "workers": int(os.environ.get("WORKERS", ImporterConfig.workers)),
        "watch_dir": os.environ.get("WATCH_DIR", ImporterConfig.watch_dir),
        "file_pattern": os.environ.get("FILE_PATTERN", ImporterConfig.file_pattern),
        "queue_size": int(os.environ.get("QUEUE_SIZE", ImporterConfig.queue_size)),
        "read_buffer_size": int(
            os.environ.get("READ_BUFFER_SIZE", ImporterConfig.read_buffer_size)
        ),
        "request_timeout": _optional_float(os.environ.get("REQUEST_TIMEOUT")),
        "log_level": os.environ.get("LOG_LEVEL", ImporterConfig.log_level),
    }

    parser = argparse.ArgumentParser(
        description="Import gzipped metric files into a time-series database"
    )
    parser.add_argument("--tsdb-url", type=str, default=None)
    parser.add_argument("--scan-interval", type=float, default=None)
    parser.add_argument("--batch-size", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None)
    parser.add_argument("--watch-dir", type=str, default=None)
    parser.add_argument("--file-pattern", type=str, default=None)
    parser.add_argument("--queue-size", type=int, default=None)
    parser.add_argument("--read-buffer-size", type=int, default=None)
    parser.add_argument("--request-timeout", type=float, default=None)
    parser.add_argument("--log-level", type=str, default=None)

    args = parser.parse_args(argv)

    # CLI flags override env vars
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    config = ImporterConfig(**{**env, **overrides})
    config.validate()
    return config
