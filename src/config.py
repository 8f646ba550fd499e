"""Application configuration loaded from environment variables and .env file."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 메타데이터 (세공/인챈트/세트 효과 어휘) 루트 디렉터리
    METADATA_DIR: str = "src/data/meta"

    # 필터 변경 후 재평가 패스까지의 지연 (ms)
    FILTER_DEFER_MS: int = Field(default=5, ge=0)

    @property
    def filter_defer_seconds(self) -> float:
        return self.FILTER_DEFER_MS / 1000


settings = Settings()
