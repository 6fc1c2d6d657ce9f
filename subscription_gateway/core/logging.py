import logging
import re
from colorlog import ColoredFormatter

# Libraries that are chatty at DEBUG/INFO and drown the gateway logs
QUIET_LOGGERS = {
    "urllib3": logging.WARNING,
    "apscheduler.executors.default": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "multipart": logging.WARNING,
}

_SECRET_PATTERNS = [
    re.compile(r"(Bearer\s+)[^\s'\",]+", re.IGNORECASE),
    re.compile(r"(client_secret['\"]?\s*[:=]\s*['\"]?)[^\s'\",&}]+", re.IGNORECASE),
    re.compile(r"(token=)[^\s&'\"]+"),
]


def redact(message: str) -> str:
    for pattern in _SECRET_PATTERNS:
        message = pattern.sub(r"\1***", message)
    return message


class RedactSecretsFilter(logging.Filter):
    """Masks bearer tokens, client secrets and subscription tokens in log lines.

    Gateway error paths log raw provider responses and URLs, which may echo them.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logger(level=logging.DEBUG):
    # Root logger, so every module logger inherits the handler
    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicated handlers on reload
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = ColoredFormatter(
        "%(log_color)s%(levelname)-8s%(reset)s | "
        "%(blue)s%(asctime)s%(reset)s | "
        "%(green)s%(name)s:%(lineno)d%(reset)s | "
        "%(white)s%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red,bg_white",
        },
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(RedactSecretsFilter())

    logger.addHandler(console_handler)

    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return logger
