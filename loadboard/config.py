import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator
from .references import ReferenceMode

load_dotenv()


_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings, read from the environment (and a .env file if present)."""
    output_dir: Path = Path("./output")
    output_file: str = "loadboard_loads.csv"
    stats_file: str = "loadboard_stats.json"
    reference_mode: ReferenceMode = ReferenceMode.SCRAPED
    redact: bool = False
    log_level: str = "INFO"
    google_maps_api_key: Optional[str] = None
    distance_interval_ms: int = 100

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.output_file

    @property
    def stats_path(self) -> Path:
        return self.output_dir / self.stats_file

    @classmethod
    def from_env(cls) -> "Settings":
        values = {}
        mapping = {
            "output_dir": "LOADBOARD_OUTPUT_DIR",
            "output_file": "LOADBOARD_OUTPUT_FILE",
            "stats_file": "LOADBOARD_STATS_FILE",
            "reference_mode": "LOADBOARD_REFERENCE_MODE",
            "log_level": "LOADBOARD_LOG_LEVEL",
            "google_maps_api_key": "GOOGLE_MAPS_API_KEY",
            "distance_interval_ms": "LOADBOARD_DISTANCE_INTERVAL_MS",
        }
        for field, env_name in mapping.items():
            value = os.getenv(env_name)
            if value:
                values[field] = value

        redact = os.getenv("LOADBOARD_REDACT")
        if redact is not None:
            values["redact"] = redact.strip().lower() in _TRUTHY

        return cls(**values)
