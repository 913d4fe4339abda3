"""In-memory repositories for CRM collections."""

from estate_crm.store.crm import COLLECTIONS, CrmDataStore
from estate_crm.store.repository import Repository

__all__ = ["COLLECTIONS", "CrmDataStore", "Repository"]
