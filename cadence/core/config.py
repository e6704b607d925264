from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://cadence:cadence@db:5432/cadence"
    APP_ENV: str = "development"
    SECRET_KEY: str = "changeme-secret-key"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://myapp.com,https://api.myapp.com"
    CORS_ORIGINS: str = "*"

    # Single-owner deployment: every row is scoped to this identity.
    OWNER_ID: str = ""

    # Summarizer (OpenAI chat completions, JSON mode)
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4.1-mini"
    SUMMARIZER_TIMEOUT_SECONDS: float = 60.0

    # Native clients send this in the x-cadence-api-key header.
    CLIENT_API_KEY: str = ""
    # Browser dashboard login.
    DASHBOARD_PASSWORD: str = ""

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
