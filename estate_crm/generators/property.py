"""Property listing generator."""

import random
from typing import Iterator

from estate_crm.generators.base import FEATURES, BaseGenerator
from estate_crm.models import Property
from estate_crm.models.base import ClientId, PropertyId
from estate_crm.models.enums import (
    PropertyCondition,
    PropertyStatus,
    PropertyType,
    TransactionType,
)


class PropertyGenerator(BaseGenerator):
    """Generate synthetic listings.

    Apartments dominate the inventory; land and buildings are rare.
    Prices follow a per-m² range by transaction type, so a sale price is
    in the millions of MAD while a rental price is a monthly rent.
    """

    PROPERTY_TYPES = list(PropertyType)
    PROPERTY_TYPE_WEIGHTS = [0.38, 0.08, 0.12, 0.04, 0.14, 0.08, 0.10, 0.06]

    TRANSACTION_TYPES = list(TransactionType)
    TRANSACTION_WEIGHTS = [0.55, 0.38, 0.07]

    CONDITIONS = list(PropertyCondition)
    CONDITION_WEIGHTS = [0.25, 0.25, 0.40, 0.10]

    # Surface ranges in m²
    SURFACE_RANGES = {
        PropertyType.APARTMENT: (45, 180),
        PropertyType.DUPLEX: (120, 260),
        PropertyType.HOUSE: (120, 350),
        PropertyType.BUILDING: (400, 1500),
        PropertyType.VILLA: (250, 900),
        PropertyType.PREMISES: (40, 300),
        PropertyType.OFFICE: (30, 250),
        PropertyType.LAND: (300, 5000),
    }

    # MAD per m²: total for sales, per month for rentals
    PRICE_PER_M2 = {
        TransactionType.SALE: (7000, 22000),
        TransactionType.RENTAL: (50, 140),
        TransactionType.SEASONAL_RENTAL: (150, 400),
    }

    TITLE_ADJECTIVES = {
        PropertyCondition.NEW: "Brand new",
        PropertyCondition.RENOVATED: "Renovated",
        PropertyCondition.GOOD_CONDITION: "Bright",
        PropertyCondition.TO_RENOVATE: "Spacious",
    }

    def __init__(self, seed: int | None = None, **kwargs) -> None:
        super().__init__(seed, **kwargs)
        self._counter = 0

    def generate(self, owner_id: ClientId | None = None) -> Property:
        """Generate a single listing, optionally owned by ``owner_id``."""
        self._counter += 1
        property_type = random.choices(self.PROPERTY_TYPES, weights=self.PROPERTY_TYPE_WEIGHTS, k=1)[0]
        transaction = random.choices(self.TRANSACTION_TYPES, weights=self.TRANSACTION_WEIGHTS, k=1)[0]
        if property_type == PropertyType.LAND:
            transaction = TransactionType.SALE
        condition = random.choices(self.CONDITIONS, weights=self.CONDITION_WEIGHTS, k=1)[0]

        surface = random.randint(*self.SURFACE_RANGES[property_type])
        per_m2 = random.uniform(*self.PRICE_PER_M2[transaction])
        # Round sales to 10k and rents to 100 MAD
        step = 10000 if transaction == TransactionType.SALE else 100
        price = max(step, round(surface * per_m2 / step) * step)

        location = self.location()
        district = location.split(", ")[-1]
        created_at = self.days_ago(0, 540)

        return Property(
            property_id=PropertyId(self.uuid()),
            property_code=f"PROP-{self._counter:04d}",
            title=f"{self.TITLE_ADJECTIVES[condition]} {property_type.value} in {district}",
            property_type=property_type,
            condition=condition,
            transaction_type=transaction,
            status=self._status(transaction),
            surface=surface,
            price=price,
            location=location,
            description=self.fake.paragraph(nb_sentences=3),
            features=random.sample(FEATURES, k=random.randint(0, 5)),
            photos=[f"/uploads/properties/{self._counter:04d}-{i}.jpg" for i in range(random.randint(1, 4))],
            rooms=None if property_type == PropertyType.LAND else max(1, surface // 35),
            owner_id=owner_id,
            created_at=created_at,
            updated_at=created_at,
        )

    def generate_batch(self, count: int, owner_ids: list[ClientId] | None = None) -> Iterator[Property]:
        """Generate ``count`` listings spread over ``owner_ids``."""
        for _ in range(count):
            yield self.generate(random.choice(owner_ids) if owner_ids else None)

    @staticmethod
    def _status(transaction: TransactionType) -> PropertyStatus:
        closed = PropertyStatus.SOLD if transaction == TransactionType.SALE else PropertyStatus.RENTED
        return random.choices(
            [PropertyStatus.AVAILABLE, PropertyStatus.PENDING, closed, PropertyStatus.ARCHIVED],
            weights=[0.65, 0.12, 0.18, 0.05],
            k=1,
        )[0]
