"""CRM data store: one repository per named collection."""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Protocol

from estate_crm.exceptions import EntityNotFoundError, RemoteFetchError, ValidationError
from estate_crm.models import (
    NEEDS_ROLES,
    Client,
    ClientNeeds,
    ContactList,
    Interaction,
    MaintenanceRequest,
    Property,
    PropertyVisit,
    RentalAlert,
    RentalContract,
    RentalDocument,
    RentalPayment,
    User,
    WhatsAppCampaign,
)
from estate_crm.models.base import AlertId, ClientId, ContractId, PropertyId, VisitId
from estate_crm.models.enums import VisitStatus
from estate_crm.storage.store import KeyValueStore, StorageKey
from estate_crm.store.repository import Repository

logger = logging.getLogger(__name__)

# Storage key -> (record type, identity field)
COLLECTIONS: dict[StorageKey, tuple[type, str]] = {
    StorageKey.PROPERTIES: (Property, "property_id"),
    StorageKey.CLIENTS: (Client, "client_id"),
    StorageKey.USERS: (User, "user_id"),
    StorageKey.RENTAL_CONTRACTS: (RentalContract, "contract_id"),
    StorageKey.RENTAL_PAYMENTS: (RentalPayment, "payment_id"),
    StorageKey.RENTAL_ALERTS: (RentalAlert, "alert_id"),
    StorageKey.MAINTENANCE_REQUESTS: (MaintenanceRequest, "request_id"),
    StorageKey.PROPERTY_VISITS: (PropertyVisit, "visit_id"),
    StorageKey.DOCUMENTS: (RentalDocument, "document_id"),
    StorageKey.WHATSAPP_CAMPAIGNS: (WhatsAppCampaign, "campaign_id"),
    StorageKey.CONTACT_LISTS: (ContactList, "list_id"),
}


class SnapshotSource(Protocol):
    """Anything able to supply fresh collections (see ``RemoteSnapshotSource``)."""

    supported_keys: tuple[StorageKey, ...]

    def fetch(self, key: StorageKey) -> list[Any]: ...


class CrmDataStore:
    """In-memory CRM state backed by a key-value store.

    Cross-entity links are weak: deleting a property or client never
    cascades, and ``resolve_*`` return None for dangling identifiers.
    """

    def __init__(
        self,
        store: KeyValueStore,
        seed: Mapping[StorageKey, Iterable[Any]] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        seed = seed or {}
        self.clock = clock
        self._repositories: dict[StorageKey, Repository] = {
            key: Repository(store, key.value, entity_type, id_field, seed.get(key), clock=clock)
            for key, (entity_type, id_field) in COLLECTIONS.items()
        }

        self.properties: Repository[Property] = self._repositories[StorageKey.PROPERTIES]
        self.clients: Repository[Client] = self._repositories[StorageKey.CLIENTS]
        self.users: Repository[User] = self._repositories[StorageKey.USERS]
        self.contracts: Repository[RentalContract] = self._repositories[StorageKey.RENTAL_CONTRACTS]
        self.payments: Repository[RentalPayment] = self._repositories[StorageKey.RENTAL_PAYMENTS]
        self.alerts: Repository[RentalAlert] = self._repositories[StorageKey.RENTAL_ALERTS]
        self.maintenance: Repository[MaintenanceRequest] = self._repositories[StorageKey.MAINTENANCE_REQUESTS]
        self.visits: Repository[PropertyVisit] = self._repositories[StorageKey.PROPERTY_VISITS]
        self.documents: Repository[RentalDocument] = self._repositories[StorageKey.DOCUMENTS]
        self.campaigns: Repository[WhatsAppCampaign] = self._repositories[StorageKey.WHATSAPP_CAMPAIGNS]
        self.contact_lists: Repository[ContactList] = self._repositories[StorageKey.CONTACT_LISTS]

    def repository(self, key: StorageKey) -> Repository:
        """Return the repository backing ``key``."""
        return self._repositories[key]

    # Weak reference lookups
    def resolve_property(self, property_id: PropertyId | None) -> Property | None:
        """Return the property or None when the reference is unset or dangling."""
        return self.properties.get(property_id)

    def resolve_client(self, client_id: ClientId | None) -> Client | None:
        """Return the client or None when the reference is unset or dangling."""
        return self.clients.get(client_id)

    def resolve_contract(self, contract_id: ContractId | None) -> RentalContract | None:
        """Return the contract or None when the reference is unset or dangling."""
        return self.contracts.get(contract_id)

    def owner_of(self, prop: Property) -> Client | None:
        return self.resolve_client(prop.owner_id)

    # Client-owned records
    def add_interaction(self, client_id: ClientId, interaction: Interaction) -> Client:
        """Append an interaction to a client and save the client collection."""
        client = self.clients.get(client_id)
        if client is None:
            raise EntityNotFoundError(f"Client {client_id} not found")
        return self.clients.upsert(replace(client, interactions=[*client.interactions, interaction]))

    def set_client_needs(self, client_id: ClientId, needs: ClientNeeds | None) -> Client:
        """Attach (or clear) a client's needs record.

        Raises
        ------
        EntityNotFoundError
            If the client does not exist.
        ValidationError
            If the client is neither a buyer nor a tenant.
        """
        client = self.clients.get(client_id)
        if client is None:
            raise EntityNotFoundError(f"Client {client_id} not found")
        if needs is not None and client.role not in NEEDS_ROLES:
            raise ValidationError(f"Client {client_id} is a {client.role.value}; only buyers and tenants have needs")
        return self.clients.upsert(replace(client, needs=needs))

    # Status updates
    def mark_alert_read(self, alert_id: AlertId) -> RentalAlert:
        alert = self.alerts.get(alert_id)
        if alert is None:
            raise EntityNotFoundError(f"Alert {alert_id} not found")
        return self.alerts.upsert(replace(alert, is_read=True))

    def update_visit_status(self, visit_id: VisitId, status: VisitStatus) -> PropertyVisit:
        visit = self.visits.get(visit_id)
        if visit is None:
            raise EntityNotFoundError(f"Visit {visit_id} not found")
        return self.visits.upsert(replace(visit, status=status))

    def mark_reminder_sent(self, visit_id: VisitId) -> PropertyVisit:
        visit = self.visits.get(visit_id)
        if visit is None:
            raise EntityNotFoundError(f"Visit {visit_id} not found")
        return self.visits.upsert(replace(visit, reminder_sent=True))

    def refresh_from_remote(self, source: SnapshotSource) -> dict[str, int]:
        """Replace local collections with the source's snapshots.

        A collection whose fetch fails, or whose snapshot is empty, keeps
        its local records.

        Returns
        -------
        dict[str, int]
            Number of records taken from the source per storage key.
        """
        refreshed: dict[str, int] = {}
        for key in source.supported_keys:
            try:
                records = source.fetch(key)
            except RemoteFetchError as e:
                logger.warning("Keeping local %s: %s", key.value, e)
                continue
            if not records:
                logger.info("Remote %s is empty, keeping %d local records", key.value, len(self._repositories[key]))
                continue
            self._repositories[key].replace_all(records)
            refreshed[key.value] = len(records)
            logger.info(
                "Refreshed %s from remote (%d records)",
                key.value,
                len(records),
                extra={"collection": key, "count": len(records)},
            )
        return refreshed

    def summary(self) -> dict[str, int]:
        """Return summary counts of all collections."""
        return {
            "properties": len(self.properties),
            "clients": len(self.clients),
            "users": len(self.users),
            "rental_contracts": len(self.contracts),
            "rental_payments": len(self.payments),
            "rental_alerts": len(self.alerts),
            "maintenance_requests": len(self.maintenance),
            "property_visits": len(self.visits),
            "documents": len(self.documents),
            "whatsapp_campaigns": len(self.campaigns),
            "contact_lists": len(self.contact_lists),
        }
