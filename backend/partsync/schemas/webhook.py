"""
Webhook schemas — inbound catalog status-change events.

Version: 1.0.0
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


PART_STATUS_CHANGED = "part.status.changed"


class PartStatusEventData(BaseModel):
    part_id: str
    status: str

    @field_validator("part_id", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> str:
        return str(value)


class WebhookEvent(BaseModel):
    event_type: str
    event_data: Dict[str, Any] = {}

    @classmethod
    def from_body(cls, body: Dict[str, Any]) -> "WebhookEvent":
        """Accept both the bare envelope and the {"event": {...}} wrapper."""
        envelope = body.get("event") if isinstance(body.get("event"), dict) else body
        return cls.model_validate(envelope)

    def status_change(self) -> Optional[PartStatusEventData]:
        if self.event_type != PART_STATUS_CHANGED:
            return None
        return PartStatusEventData.model_validate(self.event_data)


class WebhookResponse(BaseModel):
    message: str
