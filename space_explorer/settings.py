from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SPACE_EXPLORER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    nasa_api_key: str = "DEMO_KEY"
    nasa_base_url: str = "https://api.nasa.gov"
    image_search_url: str = "https://images-api.nasa.gov/search"
    iss_position_url: str = "http://api.open-notify.org/iss-now.json"
    spacex_base_url: str = "https://api.spacexdata.com/v4"

    # applies to every single upstream call, not to a whole resolver chain
    request_timeout_s: float = 10.0

    log_level: str = "INFO"
    cors_allow_origins: list[str] = ["http://localhost:3000"]
    cors_allow_headers: list[str] = ["*"]
    cors_allow_methods: list[str] = ["*"]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
