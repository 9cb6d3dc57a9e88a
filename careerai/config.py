from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_env: str = "development"  # development, staging, production
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # Application records store (SQLite locally, Postgres in deployments)
    database_url: str = "sqlite:///./careerai.db"
    secret_key: str = "replace-with-a-long-random-secret-key"
    algorithm: str = "HS256"

    # CORS origins as comma-separated values
    # Example: "https://careerai.example.com,https://staging.careerai.example.com"
    cors_allow_origins: str = "http://localhost:3000"

    # Generative text provider. Server-side only; never returned to clients.
    ai_api_key: str | None = None
    ai_endpoint_url: str = "https://generativelanguage.example.com/v1/generate"
    ai_max_tokens: int = 1200
    ai_resume_max_tokens: int = 2400  # full resumes run longer than short answers
    ai_timeout_seconds: float = 60.0

    # Bulk-apply batch bound
    bulk_apply_max_jobs: int = 10

    # Request guards
    rate_limit_ai_per_min: int = 30
    rate_limit_bulk_apply_per_min: int = 5

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
