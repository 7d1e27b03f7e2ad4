from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="WORKLOG_", extra="ignore")

    app_name: str = "WorkLog"
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    # Report formatting
    hours_decimals: int = 2
    days_decimals: int = 1


settings = Settings()
