from pydantic_settings import BaseSettings

PLACEHOLDER_SECRET_KEY = "replace-with-a-long-random-secret-key"
PLACEHOLDER_DB_CREDENTIALS = "username:password@"


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30  # 30 days
    app_env: str = "development"  # development, staging, production

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:3000"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # List endpoints
    default_page_size: int = 10
    max_page_size: int = 100

    # Admin dashboard growth window (days back from now)
    stats_growth_window_days: int = 30

    # Request guards
    rate_limit_auth_per_min: int = 20
    rate_limit_feedback_per_min: int = 10

    @property
    def is_production(self) -> bool:
        return (self.app_env or "development").lower() in {"production", "prod"}

    def placeholder_problems(self) -> list[str]:
        """Settings still holding the .env.example sample values."""
        problems = []
        if self.secret_key == PLACEHOLDER_SECRET_KEY:
            problems.append("SECRET_KEY is the sample placeholder")
        if PLACEHOLDER_DB_CREDENTIALS in self.database_url:
            problems.append("DATABASE_URL uses the sample placeholder credentials")
        return problems

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
