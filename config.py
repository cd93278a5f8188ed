import os
from typing import List, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, YamlConfigSettingsSource

CONFIG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config")


class CorsConfig(BaseModel):
    enabled: bool = False
    acceptable_origins: List[str] = []


class BookingConfig(BaseModel):
    # used for start times submitted without an offset
    timezone: str = "Asia/Kolkata"
    # duration returned when two pincodes give a zero-hour estimate
    min_duration_hours: float = 1.0
    # how many bookings the dashboard lists
    recent_limit: int = 5


class StorageConfig(BaseModel):
    # JSON-lines journal; None keeps everything in memory
    data_file: Optional[str] = None


class LoggingConfig(BaseModel):
    level: str = "INFO"


class Settings(BaseSettings):
    cors: CorsConfig = CorsConfig()
    booking: BookingConfig = BookingConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = {
        "yaml_file": os.path.join(CONFIG_DIR, f"config.{os.getenv('ENV', 'dev')}.yaml")
    }

    @classmethod
    def settings_customise_sources(cls, settings_cls, *args, **kwargs):
        return (YamlConfigSettingsSource(settings_cls),)


settings = Settings()
