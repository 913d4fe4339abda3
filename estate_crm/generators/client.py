"""Client generator with interaction history and needs."""

import random
from datetime import timedelta
from typing import Iterator

from estate_crm.generators.base import FEATURES, LOCATIONS, BaseGenerator
from estate_crm.models import NEEDS_ROLES, Client, ClientNeeds, Interaction
from estate_crm.models.base import ClientId, InteractionId, NeedsId
from estate_crm.models.enums import (
    ClientRole,
    ClientStatus,
    ContactMethod,
    InteractionOutcome,
    InteractionType,
    PropertyType,
    UrgencyLevel,
)


class ClientGenerator(BaseGenerator):
    """Generate synthetic clients.

    Buyers and tenants always carry a needs record sized to their
    budget; owners never do.
    """

    ROLES = list(ClientRole)
    ROLE_WEIGHTS = [0.35, 0.25, 0.40]

    STATUSES = list(ClientStatus)
    STATUS_WEIGHTS = [0.45, 0.08, 0.30, 0.12, 0.05]

    SOURCES = ["website", "referral", "walk-in", "facebook", "instagram", "avito", "mubawab"]
    TAGS = ["vip", "investor", "first-time buyer", "expat", "family", "student", "urgent", "corporate"]

    # (min, max) budget in MAD by role
    BUDGETS = {
        ClientRole.BUYER: (600_000, 8_000_000),
        ClientRole.TENANT: (3_000, 30_000),
    }

    INTERACTION_TYPES = [
        InteractionType.CALL,
        InteractionType.WHATSAPP,
        InteractionType.EMAIL,
        InteractionType.APPOINTMENT,
        InteractionType.PROPERTY_VIEWING,
        InteractionType.FOLLOW_UP,
    ]

    def generate(self, role: ClientRole | None = None, assigned_agent: str | None = None) -> Client:
        """Generate a single client, with a random role unless one is given."""
        role = role or random.choices(self.ROLES, weights=self.ROLE_WEIGHTS, k=1)[0]
        status = random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        created_at = self.days_ago(0, 400)

        budget = None
        needs = None
        if role in NEEDS_ROLES:
            budget = self._budget(role)
            needs = self.generate_needs(role, budget)

        interactions = sorted(
            (self.generate_interaction(created_at) for _ in range(random.randint(0, 4))),
            key=lambda i: i.date,
        )

        return Client(
            client_id=ClientId(self.uuid()),
            name=self.fake.name(),
            email=self.fake.email(),
            phone=self.phone(),
            role=role,
            status=status,
            address=f"{self.fake.street_address()}, {self.location()}",
            tags=random.sample(self.TAGS, k=random.randint(0, 2)),
            interactions=interactions,
            needs=needs,
            budget=budget,
            preferred_contact_method=random.choice(list(ContactMethod)),
            source=random.choice(self.SOURCES),
            assigned_agent=assigned_agent,
            created_at=created_at,
            updated_at=interactions[-1].date if interactions else created_at,
        )

    def generate_batch(self, count: int, agents: list[str] | None = None) -> Iterator[Client]:
        for _ in range(count):
            yield self.generate(assigned_agent=random.choice(agents) if agents else None)

    def generate_needs(self, role: ClientRole, budget: float) -> ClientNeeds:
        """Needs whose price range ends at ``budget``."""
        if role == ClientRole.TENANT:
            types = [PropertyType.APARTMENT, PropertyType.HOUSE, PropertyType.DUPLEX, PropertyType.VILLA]
        else:
            types = list(PropertyType)
        min_surface = random.choice([0, 40, 60, 80, 100, 150])
        return ClientNeeds(
            needs_id=NeedsId(self.uuid()),
            property_types=random.sample(types, k=random.randint(1, 3)),
            min_surface=min_surface,
            max_surface=min_surface + random.choice([60, 100, 200, 400]),
            min_price=round(budget * random.uniform(0.3, 0.7), -2),
            max_price=budget,
            locations=random.sample(list(LOCATIONS), k=random.randint(1, 3)),
            features=random.sample(FEATURES, k=random.randint(0, 2)),
            notes=self.fake.sentence(),
            urgency=random.choices(list(UrgencyLevel), weights=[0.2, 0.45, 0.25, 0.1], k=1)[0],
            timeline=random.choice([None, "1 month", "3 months", "6 months", "this year"]),
        )

    def generate_interaction(self, since) -> Interaction:
        """One contact event dated between ``since`` and now."""
        span = max(0, int((self.now - since).total_seconds()))
        date = since + timedelta(seconds=random.randint(0, span))
        interaction_type = random.choice(self.INTERACTION_TYPES)
        outcome = random.choice(list(InteractionOutcome))
        return Interaction(
            interaction_id=InteractionId(self.uuid()),
            interaction_type=interaction_type,
            date=date,
            notes=self.fake.sentence(),
            outcome=outcome,
            follow_up_date=(
                date + timedelta(days=random.randint(2, 14))
                if outcome == InteractionOutcome.FOLLOW_UP_REQUIRED
                else None
            ),
            duration=random.choice([5, 10, 15, 30, 45, 60]),
        )

    def _budget(self, role: ClientRole) -> float:
        low, high = self.BUDGETS[role]
        step = 100 if role == ClientRole.TENANT else 10_000
        return round(random.uniform(low, high) / step) * step
