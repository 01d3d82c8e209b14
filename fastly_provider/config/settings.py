from typing import Literal

from pydantic import AnyHttpUrl, parse_obj_as
from pydantic.env_settings import BaseSettings, EnvSettingsSource, InitSettingsSource
from pydantic.fields import Field

LogLevelType = Literal["ERROR", "WARNING", "INFO", "DEBUG", "CRITICAL"]

FASTLY_API_URL = "https://api.fastly.com"


class ApplicationSettings(BaseSettings):
    log_level: LogLevelType = "INFO"

    class Config:
        env_prefix = "APPLICATION__"
        env_file = ".env"
        env_file_encoding = "utf-8"

        @classmethod
        def customise_sources(  # type: ignore
            cls,
            init_settings: InitSettingsSource,
            env_settings: EnvSettingsSource,
            *_,
            **__,
        ):
            return env_settings, init_settings


class FastlySettings(BaseSettings):
    api_key: str = Field(..., sensitive=True)
    base_url: AnyHttpUrl = parse_obj_as(AnyHttpUrl, FASTLY_API_URL)
    client_timeout: int = 60

    class Config:
        env_prefix = "FASTLY__"
        env_file = ".env"
        env_file_encoding = "utf-8"

    def get_sensitive_fields_data(self) -> set[str]:
        return {
            str(getattr(self, field_name))
            for field_name, field in self.__fields__.items()
            if field.field_info.extra.get("sensitive", False)
        }

    @property
    def api_url(self) -> str:
        return str(self.base_url).rstrip("/")
