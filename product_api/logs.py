import logging
import sys

from loguru import logger

ASGI_EXCEPTION = "Exception in ASGI application"

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<level>{message}</level>"
)


class InterceptHandler(logging.Handler):
    """Forward standard 'logging' records (uvicorn) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # The request middleware already logs every request
        if record.name == "uvicorn.access":
            return
        # Unhandled request errors are logged by the 500 handler
        if record.name == "uvicorn.error" and record.getMessage().startswith(ASGI_EXCEPTION):
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).log(level, record.getMessage())


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.configure(extra={"request_id": "-"})
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    logger.info("Logging configured at {}", level.upper())
