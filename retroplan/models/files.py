"""
File models for Retroplan.

Models representing the structure of JSON files in the .retroplan/ directory.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from retroplan.constants import (
    DEFAULT_BASE_DAY_WIDTH,
    DEFAULT_DATABASE_URL,
    DEFAULT_DRAG_THRESHOLD_PX,
    DEFAULT_EDGE_HANDLE_WIDTH,
    DEFAULT_STORAGE_BACKEND,
)

from .plan import ProjectPlan


class PlansFile(BaseModel):
    """Model for plans.json file.

    All locally stored plans, most recently created first.
    """

    model_config = ConfigDict(populate_by_name=True)

    plans: List[ProjectPlan] = Field(default_factory=list)


class ConfigFile(BaseModel):
    """Model for config.json file.

    Timeline geometry, gesture tuning and the persistence backend.
    """

    schema_version: str = "0.1.0"

    # Timeline settings
    base_day_width: float = DEFAULT_BASE_DAY_WIDTH
    edge_handle_width: float = DEFAULT_EDGE_HANDLE_WIDTH
    drag_threshold_px: float = DEFAULT_DRAG_THRESHOLD_PX

    # Persistence settings
    storage_backend: str = DEFAULT_STORAGE_BACKEND
    database_url: str = DEFAULT_DATABASE_URL
