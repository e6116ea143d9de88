from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    WIKIPEDIA_API_URL: str = "https://en.wikipedia.org/w/api.php"
    # Nominatim rejects requests without an identifying User-Agent
    HTTP_USER_AGENT: str = "dream-travel-journal/0.1.0 (contact@example.com)"
    HTTP_TIMEOUT: int = 10

    POI_RADIUS_KM: float = 10.0
    POI_LIMIT: int = 50
    PARALLEL_LOOKUPS: bool = True

    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    MAX_TRIP_DAYS: int = 30


settings = Settings()
