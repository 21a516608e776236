import logging
import os
import sys
from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from preservica_client.infrastructure.cache.file import default_cache_dir

CONFIG_FILE_ENV = "PRESERVICA_CONFIG_FILE"
LOG_FILE_ENV = "PRESERVICA_LOG_FILE"

# Loggers that are chatty at INFO/DEBUG about every request they make
QUIET_LOGGERS = ("httpx", "httpcore", "botocore", "boto3", "urllib3")

# =============================================================================
# Network Configuration
# =============================================================================


class ProxyConfig(BaseModel):
    """Outbound HTTP proxy used for API and login calls."""

    host: str
    port: int

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"


# =============================================================================
# Client Configuration
# =============================================================================


class LoggingConfig(BaseSettings):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        return os.environ.get(LOG_FILE_ENV)


class ClientConfig(BaseSettings):
    base_url: str | None = None  # Falls back to apiUrl in the secret
    secret_name: str
    cache_duration: timedelta = timedelta(minutes=15)
    secrets_manager_endpoint: str = "https://secretsmanager.eu-west-2.amazonaws.com"
    region: str = "eu-west-2"
    proxy: ProxyConfig | None = None
    cache_dir: Path = default_cache_dir()
    timeout: float = 30.0
    max_pages: int | None = None  # None follows next links indefinitely
    single_flight_login: bool = False
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="PRESERVICA_",
        env_nested_delimiter="__",  # PRESERVICA_PROXY__HOST
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Explicit arguments, then PRESERVICA_* variables, then .env, then the YAML file."""
        # A missing or unset file contributes nothing
        yaml_settings = YamlConfigSettingsSource(
            settings_cls, yaml_file=os.environ.get(CONFIG_FILE_ENV)
        )
        return (init_settings, env_settings, dotenv_settings, yaml_settings, file_secret_settings)


def configure_logging(config: LoggingConfig) -> None:
    """Route root logging to PRESERVICA_LOG_FILE, or stderr when it is unset.

    Applications embedding the client usually own logging; call this from
    scripts and jobs that do not.
    """
    handler: logging.Handler
    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(config.format, datefmt=config.date_format))
    logging.basicConfig(level=config.level, handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
