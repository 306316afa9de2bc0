from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    project_name: str = "Visit Migration"

    mongodb_uri: str = Field(default="")
    mongodb_db: str = Field(default="goldfish")
    mongodb_timeout_ms: int = Field(default=5000)
    visits_collection: str = Field(default="visits")

    # Nominatim (OpenStreetMap) 역지오코딩
    nominatim_base_url: str = Field(default="https://nominatim.openstreetmap.org")
    geocoding_user_agent: str = Field(default="Goldfish-Migration-Script/1.0")  # Nominatim 필수 헤더
    geocoding_min_interval: float = Field(default=1.0)  # 초 단위, 1 req/sec
    geocoding_timeout: float = Field(default=10.0)

    migration_batch_size: int = Field(default=500)
    verify_sample_size: int = Field(default=5)


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]


settings = get_settings()
