"""
Logging configuration for receipt extraction service.
"""

import os
import logging
import logging.handlers
from pathlib import Path
from typing import Optional


DEFAULT_LOGGER_NAME = "receipt-extraction"


def setup_logger(service_name: str = DEFAULT_LOGGER_NAME,
                 enable_file_logging: Optional[bool] = None) -> logging.Logger:
    """
    Set up logger with conditional file logging based on DEBUG_LOG environment variable.
    
    Args:
        service_name: Name of the service for log file naming
        enable_file_logging: Force enable/disable file logging. If None, reads from DEBUG_LOG env var.
        
    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(service_name)
    
    # Clear any existing handlers
    logger.handlers.clear()
    
    if enable_file_logging is None:
        debug_log = os.getenv("DEBUG_LOG", "false").lower()
        enable_file_logging = debug_log in ("true", "1", "yes", "on")
    
    console_level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").upper())
    if not isinstance(console_level, int):
        console_level = logging.INFO
    
    if enable_file_logging:
        log_level = logging.DEBUG
        logs_dir = Path("logs")
        logs_dir.mkdir(exist_ok=True)
        
        log_file = logs_dir / f"{service_name}.log"
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))
        logger.addHandler(file_handler)
    else:
        log_level = console_level
    
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    console_handler.setLevel(console_level)
    logger.addHandler(console_handler)
    
    logger.setLevel(log_level)
    
    # Prevent duplicate logs in parent loggers
    logger.propagate = False
    
    return logger


def get_logger(logger: Optional[logging.Logger] = None) -> logging.Logger:
    """Return the given logger, or the shared service logger when none is passed."""
    return logger if logger is not None else logging.getLogger(DEFAULT_LOGGER_NAME)
