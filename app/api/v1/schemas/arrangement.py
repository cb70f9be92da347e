"""Schemas for order and layout records."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderPushRequest(BaseModel):
    """Body of POST /order."""
    
    scope: str = Field(..., min_length=1, max_length=255, description="Scope key, e.g. 'board:42'")
    order: List[str] = Field(..., description="Ids in the user's chosen order")
    base_revision: Optional[int] = Field(
        None, ge=0, description="Revision the client last saw; omit for last-write-wins"
    )


class OrderRecordResponse(BaseModel):
    """Stored order for a scope."""
    
    scope: str
    order: List[str]
    revision: int
    updated_at: datetime


class LayoutWidget(BaseModel):
    """One widget entry in a dashboard layout."""
    
    id: str = Field(..., min_length=1)
    enabled: bool = True
    order: Optional[int] = Field(None, ge=0)


class LayoutState(BaseModel):
    """Dashboard widget layout."""
    
    widgets: List[LayoutWidget] = Field(default_factory=list)
    hidden: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)


class LayoutPushRequest(BaseModel):
    """Body of POST /layout."""
    
    scope: str = Field(..., min_length=1, max_length=255)
    layout: LayoutState
    base_revision: Optional[int] = Field(None, ge=0)


class LayoutRecordResponse(BaseModel):
    """Stored layout for a scope."""
    
    scope: str
    layout: LayoutState
    revision: int
    updated_at: datetime


class PushAckResponse(BaseModel):
    """Acknowledgement of a saved order or layout."""
    
    scope: str
    revision: int
    updated_at: datetime
