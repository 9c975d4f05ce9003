from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.models import DecoderOptions, DuplicatePartBehavior


class AppConfig(BaseModel):
    decoder: DecoderOptions = Field(default_factory=DecoderOptions)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="allow")

    # Overrides the decoder section of the YAML config when set
    duplicate_part_behavior: DuplicatePartBehavior | None = Field(
        default=None, alias="RRULE_DUPLICATE_PART_BEHAVIOR"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    config_path: str = Field(default="config.yaml", alias="APP_CONFIG_PATH")

    _app_config: AppConfig | None = None
    _app_config_mtime: float | None = None

    def load_app_config(self, *, force_reload: bool = False) -> AppConfig:
        config_file = Path(self.config_path)
        if not config_file.exists():
            self._app_config = AppConfig()
            self._app_config_mtime = None
            return self._app_config

        current_mtime = config_file.stat().st_mtime
        if not force_reload and self._app_config and self._app_config_mtime == current_mtime:
            return self._app_config

        with config_file.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}

        self._app_config = AppConfig.model_validate(data)
        self._app_config_mtime = current_mtime
        return self._app_config

    def reload_app_config(self) -> AppConfig:
        """Force a reload of the application config from disk."""
        return self.load_app_config(force_reload=True)

    def decoder_options(self) -> DecoderOptions:
        """Resolve decoder options: environment first, then the config file."""
        if self.duplicate_part_behavior is not None:
            return DecoderOptions(duplicate_part_behavior=self.duplicate_part_behavior)
        return self.load_app_config().decoder


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
