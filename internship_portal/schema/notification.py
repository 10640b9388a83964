from typing import Any, Dict, Optional
from uuid import UUID
from datetime import datetime

from internship_portal.database.models.notification import NotificationType
from internship_portal.schema.common import CamelModel


class NotificationResponse(CamelModel):
    id: UUID
    type: NotificationType
    payload: Dict[str, Any]
    read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
