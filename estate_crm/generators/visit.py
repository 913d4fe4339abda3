"""Property visit generator."""

import random
from datetime import timedelta

from estate_crm.generators.base import BaseGenerator
from estate_crm.models import PropertyVisit
from estate_crm.models.base import ClientId, PropertyId, UserId, VisitId
from estate_crm.models.enums import VisitOutcome, VisitStatus, VisitType


class VisitGenerator(BaseGenerator):
    """Generate viewings around the reference time.

    Past visits are completed, cancelled or no-shows; future ones are
    scheduled or confirmed.
    """

    VISIT_TYPES = list(VisitType)
    VISIT_TYPE_WEIGHTS = [0.55, 0.20, 0.08, 0.07, 0.05, 0.05]

    def generate(
        self,
        property_id: PropertyId,
        client_id: ClientId,
        agent_id: UserId | None = None,
    ) -> PropertyVisit:
        when = (self.days_ahead(0, 21) if random.random() < 0.5 else self.days_ago(1, 60)).replace(
            hour=random.randint(9, 18), minute=random.choice([0, 30]), second=0, microsecond=0
        )
        outcome = None
        if when < self.now:
            status = random.choices(
                [VisitStatus.COMPLETED, VisitStatus.CANCELLED, VisitStatus.NO_SHOW],
                weights=[0.75, 0.15, 0.10],
                k=1,
            )[0]
            if status == VisitStatus.COMPLETED:
                outcome = random.choice(list(VisitOutcome))
        else:
            status = random.choice([VisitStatus.SCHEDULED, VisitStatus.CONFIRMED])

        created_at = min(when, self.now) - timedelta(days=random.randint(1, 10))
        return PropertyVisit(
            visit_id=VisitId(self.uuid()),
            property_id=property_id,
            client_id=client_id,
            scheduled_date=when,
            duration=random.choice([30, 45, 60, 90]),
            status=status,
            visit_type=random.choices(self.VISIT_TYPES, weights=self.VISIT_TYPE_WEIGHTS, k=1)[0],
            agent_id=agent_id,
            notes=self.fake.sentence() if random.random() < 0.4 else None,
            outcome=outcome,
            reminder_sent=status == VisitStatus.CONFIRMED or when < self.now,
            created_at=created_at,
            updated_at=created_at,
        )
