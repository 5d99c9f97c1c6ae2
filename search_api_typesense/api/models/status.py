"""
API response models for server status reporting
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class SettingsInfo(BaseModel):
    """One labelled line of the server status report"""

    label: str
    info: Optional[str] = None
    items: List[str] = Field(default_factory=list)  # Rendered as a bullet list
    status: Optional[Literal["ok", "error"]] = None


class CollectionStatus(BaseModel):
    """State of the collection backing one index"""

    index_id: str
    name: str
    exists: bool
    created_at: Optional[str] = None  # ISO 8601
    num_documents: Optional[int] = None
    schema_version: Optional[str] = None


class StatusResponse(BaseModel):
    """Response for the status endpoint"""

    available: bool
    info: List[SettingsInfo]
    timestamp: int  # Unix timestamp in ms


class HealthResponse(BaseModel):
    """Response for the health endpoint"""

    available: bool
    timestamp: int
