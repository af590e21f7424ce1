# nftmarket/utils/logging.py
from loguru import logger
import sys
from pathlib import Path
from typing import Union

from nftmarket.config import Settings, get_settings

CONSOLE_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} | {message}"


class AppLogger:
    """Loguru sinks for the marketplace client, set up once from Settings"""
    _instance = None

    def __new__(cls, settings: Union[Settings, None] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize(settings or get_settings())
        return cls._instance

    def _initialize(self, settings: Settings):
        self.level = settings.log_level.upper()
        self.log_path = Path(settings.log_dir)
        self.log_path.mkdir(parents=True, exist_ok=True)

        logger.remove()
        logger.configure(extra={"module": "nftmarket"})

        logger.add(sys.stdout, colorize=True, format=CONSOLE_FORMAT, level=self.level)

        # Uploads, mints, listings and gallery loads
        logger.add(
            self.log_path / "app.log",
            rotation="500 MB",
            retention="10 days",
            compression="zip",
            format=FILE_FORMAT,
            level=self.level
        )

        # Failed uploads, wallet refusals, reverts and orphaned tokens
        logger.add(
            self.log_path / "error.log",
            rotation="100 MB",
            retention="30 days",
            compression="zip",
            format=FILE_FORMAT,
            level="ERROR"
        )

    @staticmethod
    def get_logger(name: Union[str, None] = None):
        return logger.bind(module=name or "nftmarket")

app_logger = AppLogger()

def get_logger(name: Union[str, None] = None):
    return app_logger.get_logger(name)
