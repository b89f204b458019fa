"""
Configuration settings for the storefront.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Storefront settings loaded from environment variables."""

    # Catalog collaborator; empty means the seeded in-memory source
    CATALOG_URL: str = os.getenv("STOREFRONT_CATALOG_URL", "")
    HTTP_TIMEOUT: float = float(os.getenv("STOREFRONT_HTTP_TIMEOUT", "10"))

    # Views
    PAGE_SIZE: int = int(os.getenv("STOREFRONT_PAGE_SIZE", "7"))

    # Admin form defaults
    DEFAULT_CURRENCY: str = os.getenv("STOREFRONT_DEFAULT_CURRENCY", "€")
    DEFAULT_IMAGE: str = os.getenv("STOREFRONT_DEFAULT_IMAGE", "assets/images/default.jpg")
    IMAGE_DIR: str = os.getenv("STOREFRONT_IMAGE_DIR", "assets/images/")

    # Notifications raised without a human in the loop (API server)
    AUTO_CONFIRM: bool = os.getenv("STOREFRONT_AUTO_CONFIRM", "true").lower() == "true"

    # SDK / CLI
    API_URL: str = os.getenv("STOREFRONT_API_URL", "http://127.0.0.1:8085")

    def __init__(self):
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)
        self.logger = logging.getLogger(__name__)

        self.logger.debug(
            "Config initialized with catalog_url=%r, page_size=%s, log_level=%s",
            self.CATALOG_URL or "<in-memory>",
            self.PAGE_SIZE,
            self.log_level,
        )

    @property
    def uses_remote_catalog(self) -> bool:
        return bool(self.CATALOG_URL)


settings = Settings()
