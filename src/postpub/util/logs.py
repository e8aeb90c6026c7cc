import logging
import sys


LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
SILENCED_LOGGERS = {"urllib3": logging.WARNING, "sqlalchemy.engine": logging.WARNING}


class StderrHandler(logging.Handler):
    """Writes to whatever sys.stderr is at emit time, so redirected or captured stderr still gets logs."""

    def emit(self, record):
        try:
            sys.stderr.write(self.format(record) + "\n")
            self.flush()
        except Exception:
            self.handleError(record)


def configure_logging(level: str | int = "INFO", logger_name: str = "postpub") -> logging.Logger:
    """Install a single formatted stderr handler on the package logger and quiet noisy libraries."""
    handler = StderrHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO) if isinstance(level, str) else level)
    logger.handlers.clear()
    logger.addHandler(handler)

    for name, lvl in SILENCED_LOGGERS.items():
        logging.getLogger(name).setLevel(lvl)
    return logger
