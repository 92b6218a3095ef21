"""Planner settings, from the environment and an optional mappings file.

    REQUEST_PLANNER_DEFAULT_TIMEOUT=3000
    REQUEST_PLANNER_LOG_LEVEL=DEBUG

The mappings file maps resource names to URL templates:

    mappings:
      users: http://api.example.com/users/:id
"""

from pathlib import Path

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from request_planner.errors import PlannerError


class PlannerSettings(BaseSettings):
    """Settings read from REQUEST_PLANNER_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="REQUEST_PLANNER_")

    default_timeout: int | None = None  # milliseconds
    log_level: str = "WARNING"
    mappings: dict[str, str] = {}


def load_mappings(file_path: Path) -> dict[str, str]:
    doc = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if isinstance(doc, dict) and isinstance(doc.get("mappings"), dict):
        doc = doc["mappings"]
    if not isinstance(doc, dict):
        raise PlannerError(f"{file_path}: mappings must be a mapping of resource to URL")
    return {str(k): str(v) for k, v in doc.items()}


def load_settings(mappings_path: Path | None = None) -> PlannerSettings:
    if mappings_path:
        return PlannerSettings(mappings=load_mappings(mappings_path))
    return PlannerSettings()
