from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='app_')

    name: str = "Finance Tracker"
    budget_check_minutes: int = 60
