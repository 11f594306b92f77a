"""Typed records exchanged between the store, the analytics and the API.

Stored documents use the camelCase keys of the dashboard front end; the
models expose snake_case attributes and serialise back with ``by_alias``.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RagStatus(str, Enum):
    GREEN = "Green"
    AMBER = "Amber"
    RED = "Red"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProjectRecord(CamelModel):
    """One portfolio project as held under ``project:<code>``.

    ``current_phase`` is a display label kept by hand; it is not derived from
    ``completion_percentage``. Fields the dashboard adds later are preserved.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    project_code: str
    project_name: str = ""
    client_name: str = ""
    description: str = ""
    current_phase: str = ""
    completion_percentage: float = 0.0
    hours_allocated: float = 0.0
    hours_consumed: float = 0.0
    start_date: Optional[str] = None
    target_completion_date: Optional[str] = None
    priority: str = ""
    rag_status: str = ""


class PortfolioSnapshot(CamelModel):
    total_projects: int = 0
    total_hours_allocated: float = 0.0
    total_hours_consumed: float = 0.0
    total_hours_remaining: float = 0.0
    avg_completion: float = 0.0
    median_completion: float = 0.0
    projects_on_track: int = 0
    projects_at_risk: int = 0
    projects_overdue: int = 0
    efficiency_ratio: float = 0.0


class SharePointRequestIn(CamelModel):
    """Request to publish a new SharePoint page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    page_title: str
    page_purpose: str = ""
    target_audiences: List[str] = Field(default_factory=list)
    content_description: str = ""
    priority_level: str = "Medium"
    target_publication_date: Optional[str] = None
