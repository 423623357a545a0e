"""Process-wide logging setup for the API server and CLI scripts."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Attributes every LogRecord has; anything else was passed through extra=.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


class ContextFormatter(logging.Formatter):
    """Formatter that appends extra= fields to the message as key=value pairs."""

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        context = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in sorted(context.items()))
        return f"{line} {pairs}"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    handler = logging.StreamHandler()
    handler.setFormatter(ContextFormatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logging.basicConfig(level=level, handlers=[handler])
    logging.getLogger().setLevel(level)
