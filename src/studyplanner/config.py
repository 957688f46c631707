"""Configuration for the study planner."""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, Field

from .models import Subject

DEFAULT_CONFIG_PATH = Path.home() / ".studyplanner" / "config.json"


class Config(BaseModel):
    """Local configuration for this machine."""

    data_dir: Path = Path.home() / ".studyplanner" / "data"
    default_subject: Subject = Subject.PHYSICS
    default_duration_minutes: Annotated[int, Field(gt=0)] = 25
    log_file: Path | None = None


def load_config(path: Path) -> Config:
    """Load configuration from a JSON file."""
    return Config.model_validate_json(path.read_text())
