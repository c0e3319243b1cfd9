"""
Configuration management using environment variables.
Handles security, store and logging settings with validation and defaults.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class AppConfig(BaseSettings):
    """
    Configuration class for the catalog core.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Token Signing
    secret_key: str = Field(default="change-me-in-production-use-32-plus-bytes")
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)

    # Password Hashing
    password_hash_iterations: int = Field(default=120_000)

    # Review Handling
    review_delete_delay_seconds: float = Field(default=0.0)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @validator('access_token_expire_minutes')
    def validate_token_expiry(cls, v):
        """Ensure token lifetime is positive."""
        if v < 1:
            raise ValueError('access_token_expire_minutes must be at least 1')
        return v

    @validator('password_hash_iterations')
    def validate_iterations(cls, v):
        """Ensure iteration count is reasonable."""
        if v < 1 or v > 10_000_000:
            raise ValueError('password_hash_iterations must be between 1 and 10000000')
        return v

    @validator('review_delete_delay_seconds')
    def validate_delete_delay(cls, v):
        """Ensure the artificial delay stays short."""
        if v < 0 or v > 30:
            raise ValueError('review_delete_delay_seconds must be between 0 and 30')
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = AppConfig()
