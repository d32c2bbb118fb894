"""Logging for the API process: brief console output, detailed rotating file"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_BYTES = 10 * 1024 * 1024  # 10MB
LOG_FILE_BACKUPS = 5

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")


def setup_logging(log_file: str = "logs/policy-rag.log", console_level: int = logging.INFO, file_level: int = logging.DEBUG) -> Path:
    """
    Route all loggers to the console and to a size-rotated log file.

    Ingestion and chat log section titles, scores and keywords at DEBUG,
    so the file keeps DEBUG while the console stays at INFO.

    Args:
        log_file: Log file path (parent directories are created)
        console_level: Console logging level
        file_level: File logging level

    Returns:
        Path of the log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=LOG_FILE_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding='utf-8',
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(console_level, file_level))
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging to console ({logging.getLevelName(console_level)}) and {log_path} ({logging.getLevelName(file_level)})")
    return log_path
