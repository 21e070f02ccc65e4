"""
Configuration for the linear regression tool.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    log_dir: str = Field(default="logs")
    log_file: str = Field(default="lin-reg-tool.log")
    rotation: str = Field(default="10 MB")
    retention: str = Field(default="7 days")
    enable_file: bool = Field(default=False)

    model_config = SettingsConfigDict(env_prefix="LOG_")


class MLflowSettings(BaseSettings):
    """MLflow configuration."""

    # Tracking is opt-in; the tool works without a tracking server
    enabled: bool = Field(default=False)
    tracking_uri: str = Field(default="sqlite:///mlflow.db")
    experiment_name: str = Field(default="grt-lin-reg-tool")
    registered_model_name: str | None = Field(default=None)

    model_config = SettingsConfigDict(
        env_prefix="MLFLOW_",
        populate_by_name=True,
    )


class Settings(BaseSettings):
    """Main settings."""

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    mlflow: MLflowSettings = Field(default_factory=MLflowSettings)


settings = Settings()

__all__ = ["settings", "LoggingSettings", "MLflowSettings", "Settings"]
