from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # FlowOffice API
    FLOWOFFICE_BASE_URL: str = "https://app.flow-office.eu"
    FLOWOFFICE_API_KEY: str = ""
    FLOWOFFICE_TIMEOUT_SECONDS: float = 30.0

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://flowoffice:flowoffice_dev@db:5432/flowoffice"

    # Triggers
    INSTANCE_ID: str = "n8n"
    TRIGGER_MATCH_MODE: str = "all"

    # Actions
    PROJECT_BATCH_SIZE: int = 30
    STATUS_VALUE_EXPRESSION: str = "={{ $json.status.to.labelKey }}"

    # App
    APP_ENV: str = "development"
    APP_URL: str = "http://localhost:8000"
    ALLOWED_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
