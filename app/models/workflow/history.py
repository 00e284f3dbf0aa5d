from pydantic import BaseModel, Field
from typing import Dict, Any
from datetime import datetime


class HistoryEntry(BaseModel):
    """Append-only history entry kept on assignments and submissions"""
    action: str
    actor_id: str
    timestamp: datetime
    details: Dict[str, Any] = Field(default_factory=dict)
