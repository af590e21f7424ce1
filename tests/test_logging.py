from __future__ import annotations

from pathlib import Path

from loguru import logger

from nftmarket.config import get_settings
from nftmarket.utils.logging import app_logger, get_logger


def test_logger_writes_to_configured_directory():
    assert app_logger.log_path == Path(get_settings().log_dir)
    assert app_logger.log_path.is_dir()


def test_get_logger_binds_module_name():
    records = []
    handler = logger.add(lambda message: records.append(message.record), level="INFO")
    try:
        get_logger("nftmarket.services.gallery").info("Loaded 2 created items")
        get_logger().info("startup")
    finally:
        logger.remove(handler)

    assert [record["extra"]["module"] for record in records] == ["nftmarket.services.gallery", "nftmarket"]
