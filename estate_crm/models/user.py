"""Agency staff user model."""

from dataclasses import dataclass
from datetime import datetime

from estate_crm.models.base import UserId
from estate_crm.models.enums import UserRole


@dataclass
class User:
    """Agency staff member (admin, agent or assistant)."""

    user_id: UserId
    name: str
    email: str
    role: UserRole
    phone: str | None = None
    avatar_url: str | None = None
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
