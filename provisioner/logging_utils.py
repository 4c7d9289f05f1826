from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_PATH = "provisioner.log"

# Success notices sit between INFO and WARNING.
OK = 25
logging.addLevelName(OK, "OK")

_LEVEL_NAMES = {
    logging.WARNING: "WARN",
    logging.CRITICAL: "ERROR",
}

LOG_FORMAT = "[%(levelname)s] [%(asctime)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class LineFormatter(logging.Formatter):
    """Render records as ``[LEVEL] [yyyy-MM-dd HH:mm:ss] message``."""

    def __init__(self) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = _LEVEL_NAMES.get(record.levelno, original)
        try:
            return super().format(record)
        finally:
            record.levelname = original


class AppendFileHandler(logging.FileHandler):
    """File handler that releases the file after every record."""

    def __init__(self, filename: str) -> None:
        super().__init__(filename, mode="a", encoding="utf-8", delay=True)

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.acquire()
        try:
            if self.stream is not None:
                self.stream.close()
                self.stream = None  # type: ignore[assignment]
        finally:
            self.release()


def log_ok(logger: logging.Logger, msg: str, *args: object) -> None:
    logger.log(OK, msg, *args)


def _open_file_handler(path: str) -> logging.Handler:
    Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    # Touch the file now so an unwritable location is detected up front.
    with open(path, "a", encoding="utf-8"):
        pass
    return AppendFileHandler(path)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every record goes to the append-only log file. If the requested path
    cannot be written, a ``provisioner.log`` in the working directory is
    used instead.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_provisioner_configured", False):
        return getattr(logger, "_provisioner_log_path", log_path)

    fmt = LineFormatter()
    handlers: list[logging.Handler] = []

    file_handler: Optional[logging.Handler] = None
    try:
        file_handler = _open_file_handler(log_path)
        chosen_path = log_path
    except OSError:
        fallback = str(Path.cwd() / "provisioner.log")
        file_handler = _open_file_handler(fallback)
        chosen_path = fallback
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_provisioner_configured", True)
    setattr(logger, "_provisioner_log_path", chosen_path)
    setattr(logger, "_provisioner_handlers", handlers)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path


def reset_logging() -> None:
    """Detach handlers installed by configure_logging()."""

    logger = logging.getLogger()
    for h in getattr(logger, "_provisioner_handlers", []):
        logger.removeHandler(h)
        h.close()
    for attr in ("_provisioner_configured", "_provisioner_log_path", "_provisioner_handlers"):
        if hasattr(logger, attr):
            delattr(logger, attr)
