import logging
import sys
from pathlib import Path

from app.core.config import settings


def setup_logging():
    """Configure root logging"""
    log_level = logging.DEBUG if settings.environment == "development" else logging.INFO

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Avoid stacking handlers when the app module is imported more than once
    if not any(getattr(h, "_cbt_portal", False) for h in root_logger.handlers):
        console_handler._cbt_portal = True
        root_logger.addHandler(console_handler)

        # File handler (production)
        if settings.environment == "production":
            log_dir = Path("/app/logs")
            log_dir.mkdir(exist_ok=True)

            file_handler = logging.FileHandler(log_dir / "app.log", encoding="utf-8")
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.INFO)
            file_handler._cbt_portal = True
            root_logger.addHandler(file_handler)

    # SQL echo goes through the sqlalchemy logger
    if settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
