"""Domain models for the real-estate CRM."""

from estate_crm.models.campaign import CampaignContent, ContactList, WhatsAppCampaign
from estate_crm.models.client import (
    NEEDS_ROLES,
    Client,
    ClientNeeds,
    Interaction,
    NeedsRequest,
)
from estate_crm.models.maintenance import MaintenanceRequest
from estate_crm.models.property import Property
from estate_crm.models.rental import (
    RentalAlert,
    RentalContract,
    RentalDocument,
    RentalPayment,
)
from estate_crm.models.user import User
from estate_crm.models.visit import PropertyVisit

__all__ = [
    "NEEDS_ROLES",
    "CampaignContent",
    "Client",
    "ClientNeeds",
    "ContactList",
    "Interaction",
    "MaintenanceRequest",
    "NeedsRequest",
    "Property",
    "PropertyVisit",
    "RentalAlert",
    "RentalContract",
    "RentalDocument",
    "RentalPayment",
    "User",
    "WhatsAppCampaign",
]
