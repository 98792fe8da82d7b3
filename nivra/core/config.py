from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "sqlite:///./nivra.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "http://localhost:5173,http://127.0.0.1:5173"
    CORS_ORIGINS: str = "*"

    # Storage slot keys are "<prefix>entries", "<prefix>labels", ...
    SLOT_PREFIX: str = "nivra_"

    # Keep-last-N windows. The chart window is applied at refresh time only.
    ENTRY_LIMIT: int = 240
    SERIES_LIMIT: int = 240
    CHART_WINDOW: int = 120

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
