from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Google Maps Platform credential (Places + Static Maps APIs)
    GOOGLE_MAPS_API_KEY: str = ""
    GOOGLE_MAPS_BASE_URL: str = "https://maps.googleapis.com/maps/api"

    # Shared secret expected in the x-api-key header from the widget
    FRONTEND_API_KEY: str = ""

    # "development" skips the x-api-key check
    ENVIRONMENT: str = "production"

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    LOGGER: int = 20
    LOG_DIRECTORY: str = "logs"

    # Provider call tuning
    CACHE_TTL_SECONDS: int = 3600
    SEARCH_TIMEOUT: float = 15.0
    DETAIL_TIMEOUT: float = 10.0
    MAX_SEARCH_RESULTS: int = 5

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

settings = Settings()
