from functools import lru_cache
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Literal, Optional

from http_screenshotter.console import console
from http_screenshotter.s3 import S3Client


class Config(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    env: str = "dev"

    # Renderer
    browser_name: Literal["chromium", "firefox", "webkit"] = "chromium"
    headless: bool = True
    navigation_timeout_ms: int = 30000
    wait_until: Literal["load", "domcontentloaded", "networkidle", "commit"] = (
        "networkidle"
    )
    viewport_width: int = 1280
    viewport_height: int = 720

    # Batch
    batch_timeout_s: float = 30

    # Object store mirror
    aws_profile: Optional[str] = Field(None)
    aws_access_key_id: Optional[str] = Field(None)
    aws_secret_access_key: Optional[SecretStr] = Field(None)
    aws_region: Optional[str] = Field(None)
    aws_endpoint_url: Optional[str] = Field(None)
    aws_bucket_name: Optional[str] = Field(None)
    max_file_size_mb: Optional[int] = Field(100)

    @property
    def s3_client(self):
        return S3Client(self)

    @property
    def mirror_enabled(self) -> bool:
        return bool(self.aws_bucket_name)


@lru_cache()
def get_config() -> Config:
    """Get cached config instance."""

    config = Config()
    console.log(config)
    return config
