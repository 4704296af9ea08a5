"""
ZAP Confeitaria - Notification Schemas
"""
from pydantic import BaseModel
from typing import List, Literal, Optional
from datetime import date


class NotificationItem(BaseModel):
    id: str
    type: Literal["birthday", "delivery", "pending_deposit"]
    title: str
    message: str
    date: date
    priority: Literal["high", "medium", "low"]
    client_id: Optional[str] = None
    order_id: Optional[str] = None


class NotificationsResponse(BaseModel):
    notifications: List[NotificationItem]
    total_count: int
    high_priority_count: int
