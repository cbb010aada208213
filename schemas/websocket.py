"""WebSocket message schemas."""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


class WebSocketMessage(BaseModel):
    """Mission tracking message from client."""
    event: str = Field(..., description="position, target or position_error")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event payload")
    session_id: Optional[str] = Field(None, description="Session identifier")


class WebSocketResponse(BaseModel):
    """Mission tracking message to client."""
    event: str = Field(..., description="connected, position, mission_completed, missions, status or error")
    data: Any = Field(..., description="Event payload")
    session_id: Optional[str] = Field(None, description="Session identifier")
    timestamp: datetime = Field(default_factory=datetime.now)
