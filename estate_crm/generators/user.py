"""Agency staff generator."""

import random

from estate_crm.generators.base import BaseGenerator
from estate_crm.models import User
from estate_crm.models.base import UserId
from estate_crm.models.enums import UserRole


class UserGenerator(BaseGenerator):
    """Generate staff accounts; the first one is always an admin."""

    def __init__(self, seed: int | None = None, **kwargs) -> None:
        super().__init__(seed, **kwargs)
        self._generated = 0

    def generate(self, role: UserRole | None = None) -> User:
        if role is None:
            role = UserRole.ADMIN if self._generated == 0 else random.choices(
                [UserRole.AGENT, UserRole.ASSISTANT], weights=[0.75, 0.25], k=1
            )[0]
        self._generated += 1
        created_at = self.days_ago(60, 900)
        return User(
            user_id=UserId(self.uuid()),
            name=self.fake.name(),
            email=self.fake.company_email(),
            role=role,
            phone=self.phone(),
            is_active=random.random() < 0.9,
            last_login=self.days_ago(0, 14),
            created_at=created_at,
            updated_at=created_at,
        )
