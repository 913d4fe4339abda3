"""Base generator class for seed data generators."""

from __future__ import annotations

import random
from abc import ABC
from datetime import datetime, timedelta

from faker import Faker

# Weighted "City, District" locations served by the agency
LOCATIONS: dict[str, float] = {
    "Casablanca, Anfa": 0.14,
    "Casablanca, Maarif": 0.12,
    "Casablanca, Ain Diab": 0.08,
    "Casablanca, Bourgogne": 0.06,
    "Rabat, Agdal": 0.10,
    "Rabat, Souissi": 0.07,
    "Rabat, Hay Riad": 0.07,
    "Marrakech, Guéliz": 0.09,
    "Marrakech, Hivernage": 0.05,
    "Marrakech, Palmeraie": 0.04,
    "Tanger, Malabata": 0.06,
    "Agadir, Founty": 0.05,
    "Fès, Ville Nouvelle": 0.04,
    "Bouskoura, Ville Verte": 0.03,
}

FEATURES = [
    "balcony",
    "terrace",
    "garden",
    "swimming pool",
    "parking",
    "garage",
    "elevator",
    "air conditioning",
    "central heating",
    "concierge",
    "security 24/7",
    "sea view",
    "furnished",
    "equipped kitchen",
    "storage room",
]


class BaseGenerator(ABC):
    """Base class for all seed generators.

    Provides common initialization: Faker instance creation, seed-based
    reproducibility and a reference clock so that relative dates (created
    last month, due next week) are stable across runs.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``fr_FR``).
    now : datetime | None
        Reference time for generated dates (default: current time).
    """

    def __init__(
        self,
        seed: int | None = None,
        locale: str = "fr_FR",
        now: datetime | None = None,
    ) -> None:
        self.fake = Faker(locale)
        self.now = now or datetime.now().replace(microsecond=0)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    def uuid(self) -> str:
        return self.fake.uuid4()

    def phone(self) -> str:
        """Moroccan mobile number."""
        return self.fake.numerify("+212 6## ## ## ##")

    def location(self) -> str:
        return random.choices(list(LOCATIONS), weights=list(LOCATIONS.values()), k=1)[0]

    def days_ago(self, low: int, high: int) -> datetime:
        return self.now - timedelta(days=random.randint(low, high), minutes=random.randint(0, 1439))

    def days_ahead(self, low: int, high: int) -> datetime:
        return self.now + timedelta(days=random.randint(low, high), minutes=random.randint(0, 1439))
