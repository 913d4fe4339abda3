"""Faker-driven seed data generators."""

from estate_crm.generators.campaign import CampaignGenerator
from estate_crm.generators.client import ClientGenerator
from estate_crm.generators.maintenance import MaintenanceGenerator
from estate_crm.generators.property import PropertyGenerator
from estate_crm.generators.rental import RentalGenerator
from estate_crm.generators.scenario import SeedScenario
from estate_crm.generators.user import UserGenerator
from estate_crm.generators.visit import VisitGenerator

__all__ = [
    "CampaignGenerator",
    "ClientGenerator",
    "MaintenanceGenerator",
    "PropertyGenerator",
    "RentalGenerator",
    "SeedScenario",
    "UserGenerator",
    "VisitGenerator",
]
