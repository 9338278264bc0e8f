import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

from config.settings import settings

# debug.log gets everything, api.log info and up, error.log errors only
LOG_FILES = (
    ("debug.log", logging.DEBUG),
    ("api.log", logging.INFO),
    ("error.log", logging.ERROR),
)
MAX_BYTES = 10*1024*1024  # 10MB
BACKUP_COUNT = 5


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding='utf-8'
    )
    handler.setFormatter(formatter)
    handler.setLevel(level)
    return handler


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None,
    level: Optional[str] = None
) -> logging.Logger:
    """Attach the rotating file handlers and a console handler to the root logger.

    Calling it again replaces the handlers installed by the previous call.
    """
    directory = Path(log_dir or settings.LOG_DIR)
    directory.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(settings.LOG_FORMAT)

    handlers = [
        _rotating_handler(directory / filename, handler_level, formatter)
        for filename, handler_level in LOG_FILES
    ]
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG)
    handlers.append(console_handler)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if getattr(handler, "rustspace_handler", False):
            root_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        handler.rustspace_handler = True
        root_logger.addHandler(handler)
    root_logger.setLevel(level or settings.LOG_LEVEL)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return root_logger
