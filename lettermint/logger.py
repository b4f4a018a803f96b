import sys
from loguru import logger as _loguru_logger


def _ensure_request_id(record):
    """Patch function to ensure request_id is always present in log records."""
    if "extra" not in record:
        record["extra"] = {}
    if "request_id" not in record["extra"]:
        record["extra"]["request_id"] = "lettermint"
    if "security_event" not in record["extra"]:
        record["extra"]["security_event"] = False
    return record


# Library code must not touch the host application's sinks, so records from
# this package are muted until setup_logging() (or logger.enable) is called.
logger = _loguru_logger.patch(_ensure_request_id)
logger.disable("lettermint")

_handler_id = None


def setup_logging(level="INFO", sink=None, serialize=False):
    """Enable SDK logging and attach a sink.

    Args:
        level: Minimum level for the SDK sink.
        sink: Any loguru sink (defaults to stderr).
        serialize: Emit JSON records instead of the text format.

    Returns:
        The patched logger instance.
    """
    global _handler_id

    if _handler_id is not None:
        _loguru_logger.remove(_handler_id)

    _handler_id = _loguru_logger.add(
        sink or sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[request_id]} | {message}",
        level=level,
        serialize=serialize,
        filter="lettermint",
        backtrace=False,
        diagnose=False,
    )
    _loguru_logger.enable("lettermint")
    return logger
