"""
Base configuration settings
"""

import os
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Base settings configuration"""

    # Application settings
    APP_NAME: str = "Stream Relay"
    VERSION: str = "1.0.0"
    DEBUG: bool = False

    # API settings
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    ALLOWED_ORIGINS_STR: str = "http://localhost:5173"  # Vite dev server

    # Cloudflare Stream settings
    CLOUDFLARE_ACCOUNT_ID: str = ""
    CLOUDFLARE_API_TOKEN: str = ""
    CLOUDFLARE_BASE_URL: str = "https://api.cloudflare.com/client/v4"
    REMOTE_TIMEOUT: float = 300.0  # uploads can be large

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    # Client settings
    RELAY_URL: str = "http://localhost:3000"
    POLL_INTERVAL: float = 5.0

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        """Parse allowed origins from string"""
        origins_str = os.getenv('ALLOWED_ORIGINS', self.ALLOWED_ORIGINS_STR)
        return [origin.strip() for origin in origins_str.split(',') if origin.strip()]

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"  # Ignore extra fields from .env
    }


# Create settings instance
settings = Settings()
