"""Seed scenario: a coherent agency book of business."""

import logging
import random
from datetime import datetime

from estate_crm.config import SeedConfig
from estate_crm.generators.campaign import CampaignGenerator
from estate_crm.generators.client import ClientGenerator
from estate_crm.generators.maintenance import MaintenanceGenerator
from estate_crm.generators.property import PropertyGenerator
from estate_crm.generators.rental import RentalGenerator
from estate_crm.generators.user import UserGenerator
from estate_crm.generators.visit import VisitGenerator
from estate_crm.models import Client, Property
from estate_crm.models.enums import ClientRole, PropertyStatus, RentalStatus, TransactionType
from estate_crm.storage.store import KeyValueStore, StorageKey
from estate_crm.store.crm import CrmDataStore

logger = logging.getLogger(__name__)


class SeedScenario:
    """Generate every CRM collection with consistent cross-references.

    Owners own the listings, tenants rent the rental listings through
    contracts with monthly payments, buyers and tenants visit available
    listings, and rented properties get maintenance requests.
    """

    def __init__(
        self,
        sizes: SeedConfig | None = None,
        seed: int | None = None,
        now: datetime | None = None,
        maintenance_rate: float = 0.4,
        num_campaigns: int = 4,
    ) -> None:
        """Initialize the seed scenario.

        Parameters
        ----------
        sizes : SeedConfig | None
            Collection sizes (default ``SeedConfig()``).
        seed : int | None
            Random seed for reproducibility.
        now : datetime | None
            Reference time for relative dates.
        maintenance_rate : float
            Share of contracts with a maintenance request.
        num_campaigns : int
            Number of WhatsApp campaigns.
        """
        self.sizes = sizes or SeedConfig()
        self.seed = seed
        self.now = now or datetime.now().replace(microsecond=0)
        self.maintenance_rate = maintenance_rate
        self.num_campaigns = num_campaigns

        if seed is not None:
            random.seed(seed)

        self._user_gen = UserGenerator(seed=seed, now=self.now)
        self._client_gen = ClientGenerator(seed=seed, now=self.now)
        self._property_gen = PropertyGenerator(seed=seed, now=self.now)
        self._rental_gen = RentalGenerator(seed=seed, now=self.now)
        self._maintenance_gen = MaintenanceGenerator(seed=seed, now=self.now)
        self._visit_gen = VisitGenerator(seed=seed, now=self.now)
        self._campaign_gen = CampaignGenerator(seed=seed, now=self.now)

    def generate(self) -> dict[StorageKey, list]:
        """Generate all collections, keyed by storage key."""
        sizes = self.sizes
        logger.info(
            "Starting seed scenario: %d properties, %d clients, %d users",
            sizes.num_properties,
            sizes.num_clients,
            sizes.num_users,
        )

        users = [self._user_gen.generate() for _ in range(sizes.num_users)]
        agents = [u.name for u in users]
        clients = list(self._client_gen.generate_batch(sizes.num_clients, agents))
        owners = self._with_role(clients, ClientRole.OWNER)
        tenants = self._with_role(clients, ClientRole.TENANT)

        properties = list(self._property_gen.generate_batch(
            sizes.num_properties, [o.client_id for o in owners]
        ))
        owners_by_id = {o.client_id: o for o in owners}
        for owner in owners:
            owner.properties = [p.property_id for p in owned_properties(owner, properties)]

        contracts, payments, alerts, documents, maintenance = [], [], [], [], []
        rentals = [p for p in properties if p.transaction_type == TransactionType.RENTAL and p.owner_id]
        random.shuffle(rentals)
        for prop in rentals:
            if not tenants:
                break
            owner = owners_by_id[prop.owner_id]
            if sum(1 for c in contracts if c.owner_id == owner.client_id) >= sizes.contracts_per_owner[1]:
                continue
            tenant = random.choice(tenants)
            contract = self._rental_gen.generate_contract(prop, tenant.client_id, owner.client_id)
            contract_payments = self._rental_gen.generate_payments(contract, sizes.payments_per_contract)
            contracts.append(contract)
            payments.extend(contract_payments)
            alerts.extend(self._rental_gen.generate_alerts(contract, contract_payments))
            documents.extend(contract.documents)
            if contract.status == RentalStatus.ACTIVE:
                prop.status = PropertyStatus.RENTED
            if random.random() < self.maintenance_rate:
                maintenance.append(
                    self._maintenance_gen.generate(prop.property_id, contract.contract_id, tenant.client_id)
                )

        visits = []
        listed = [p for p in properties if p.status == PropertyStatus.AVAILABLE]
        seekers = [c for c in clients if c.role != ClientRole.OWNER]
        if listed:
            for client in seekers:
                for _ in range(random.randint(*sizes.visits_per_client)):
                    agent = random.choice(users).user_id if users else None
                    visits.append(self._visit_gen.generate(random.choice(listed).property_id, client.client_id, agent))

        contact_lists = [self._campaign_gen.generate_contact_list()]
        campaigns = [
            self._campaign_gen.generate(listed, contact_lists[0] if i == 0 else None)
            for i in range(self.num_campaigns)
        ]

        snapshot = {
            StorageKey.USERS: users,
            StorageKey.CLIENTS: clients,
            StorageKey.PROPERTIES: properties,
            StorageKey.RENTAL_CONTRACTS: contracts,
            StorageKey.RENTAL_PAYMENTS: payments,
            StorageKey.RENTAL_ALERTS: alerts,
            StorageKey.DOCUMENTS: documents,
            StorageKey.MAINTENANCE_REQUESTS: maintenance,
            StorageKey.PROPERTY_VISITS: visits,
            StorageKey.WHATSAPP_CAMPAIGNS: campaigns,
            StorageKey.CONTACT_LISTS: contact_lists,
        }
        logger.info(
            "Generated seed data: %s",
            ", ".join(f"{len(records)} {key.value}" for key, records in snapshot.items()),
        )
        return snapshot

    def build_store(self, store: KeyValueStore) -> CrmDataStore:
        """Open a ``CrmDataStore`` seeded with this scenario.

        Collections already present in ``store`` are kept as they are.
        """
        return CrmDataStore(store, seed=self.generate(), clock=lambda: self.now)

    @staticmethod
    def _with_role(clients: list[Client], role: ClientRole) -> list[Client]:
        return [c for c in clients if c.role == role]


def owned_properties(owner: Client, properties: list[Property]) -> list[Property]:
    return [p for p in properties if p.owner_id == owner.client_id]
