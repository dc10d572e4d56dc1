from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    import_path: str = ""  # glob, directory or file; empty → current directory
    log_level: str = "INFO"
    log_file: Optional[str] = None  # e.g. "debug.log"; stderr if unset
    tick_hz: int = Field(60, gt=0)
    playback_speed: int = 1  # 1-10
    speed_boost: int = 20  # added to the playback speed for a single tick

    class Config:
        env_prefix = "FIT_"
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
