import os
from dataclasses import dataclass, field

@dataclass(frozen=True)
class Settings:
    LOG_LEVEL: str = field(default="INFO")
    LOG_JSON: bool = field(default=False)

    @staticmethod
    def from_env() -> "Settings":
        log_level = os.getenv("CERTGLANCE_LOG_LEVEL", "INFO").upper()
        log_json = os.getenv("CERTGLANCE_LOG_JSON", "false").lower() in ("1", "true", "yes")
        return Settings(LOG_LEVEL=log_level, LOG_JSON=log_json)
