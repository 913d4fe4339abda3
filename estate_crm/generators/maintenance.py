"""Maintenance request generator."""

import random
from datetime import timedelta

from estate_crm.generators.base import BaseGenerator
from estate_crm.models import MaintenanceRequest
from estate_crm.models.base import ClientId, ContractId, MaintenanceRequestId, PropertyId
from estate_crm.models.enums import (
    MaintenanceCategory,
    MaintenancePriority,
    MaintenanceStatus,
)


class MaintenanceGenerator(BaseGenerator):
    """Generate repair jobs; completed jobs carry a cost."""

    ISSUES = {
        MaintenanceCategory.PLUMBING: ["Leaking kitchen tap", "Blocked bathroom drain", "Water heater failure"],
        MaintenanceCategory.ELECTRICAL: ["Power outage in bedroom", "Faulty wall socket", "Broken light fixture"],
        MaintenanceCategory.HEATING: ["Radiator not heating", "Air conditioning not cooling"],
        MaintenanceCategory.APPLIANCES: ["Fridge not cooling", "Washing machine leaking", "Oven not working"],
        MaintenanceCategory.STRUCTURAL: ["Crack in living room wall", "Damp patch on ceiling"],
        MaintenanceCategory.CLEANING: ["End of lease deep cleaning", "Facade cleaning"],
        MaintenanceCategory.GARDEN: ["Garden maintenance", "Pool cleaning"],
        MaintenanceCategory.SECURITY: ["Front door lock broken", "Intercom not working"],
        MaintenanceCategory.OTHER: ["Pest control", "Window shutter stuck"],
    }

    PROVIDERS = ["Atlas Plomberie", "ElecPro Casa", "Clim Service", "Jardins du Maroc", "Multi Services Rabat"]

    STATUSES = list(MaintenanceStatus)
    STATUS_WEIGHTS = [0.25, 0.15, 0.15, 0.40, 0.05]

    PRIORITIES = list(MaintenancePriority)
    PRIORITY_WEIGHTS = [0.30, 0.40, 0.22, 0.08]

    def generate(
        self,
        property_id: PropertyId,
        contract_id: ContractId | None = None,
        tenant_id: ClientId | None = None,
    ) -> MaintenanceRequest:
        category = random.choice(list(self.ISSUES))
        status = random.choices(self.STATUSES, weights=self.STATUS_WEIGHTS, k=1)[0]
        reported = self.days_ago(0, 180)

        scheduled = completed = cost = provider = None
        if status != MaintenanceStatus.REPORTED:
            provider = random.choice(self.PROVIDERS)
            scheduled = reported + timedelta(days=random.randint(1, 7))
        if status == MaintenanceStatus.COMPLETED:
            completed = scheduled + timedelta(days=random.randint(0, 5))
            cost = float(random.randrange(200, 8000, 50))

        return MaintenanceRequest(
            request_id=MaintenanceRequestId(self.uuid()),
            property_id=property_id,
            title=random.choice(self.ISSUES[category]),
            description=self.fake.sentence(nb_words=12),
            category=category,
            priority=random.choices(self.PRIORITIES, weights=self.PRIORITY_WEIGHTS, k=1)[0],
            status=status,
            reported_date=reported,
            contract_id=contract_id,
            tenant_id=tenant_id,
            scheduled_date=scheduled,
            completed_date=completed,
            cost=cost,
            assigned_to=provider,
        )
