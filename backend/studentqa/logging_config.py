import logging
import logging.handlers
import sys
from pathlib import Path

from pythonjsonlogger import jsonlogger

from studentqa.config import settings


def setup_logging() -> None:
    """Configure application logging with structured JSON or text format."""
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, settings.log_level))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, settings.log_level))

    if settings.log_format == 'json':
        formatter = jsonlogger.JsonFormatter(
            '%(asctime)s %(levelname)s %(name)s %(message)s %(funcName)s',
            rename_fields={'levelname': 'level', 'asctime': 'timestamp'},
            datefmt='%Y-%m-%dT%H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if settings.enable_log_rotation:
        log_path = Path(settings.log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # 10MB max, keep 5 backups
        file_handler = logging.handlers.RotatingFileHandler(
            settings.log_file_path,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
        file_handler.setLevel(getattr(logging, settings.log_level))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # SQL statements are only interesting when echo is requested
    if not settings.database_echo:
        logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    logger.debug(
        f"Logging configured: level={settings.log_level}, "
        f"format={settings.log_format}, rotation={settings.enable_log_rotation}"
    )
