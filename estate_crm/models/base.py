"""Identifier types shared across entities.

Cross-entity links are weak: a stored identifier may point at an entity
that no longer exists. Use the ``resolve_*`` helpers on ``CrmDataStore``
to look them up and handle ``None`` explicitly.
"""

from typing import NewType

PropertyId = NewType("PropertyId", str)
ClientId = NewType("ClientId", str)
InteractionId = NewType("InteractionId", str)
NeedsId = NewType("NeedsId", str)
UserId = NewType("UserId", str)
ContractId = NewType("ContractId", str)
PaymentId = NewType("PaymentId", str)
AlertId = NewType("AlertId", str)
DocumentId = NewType("DocumentId", str)
MaintenanceRequestId = NewType("MaintenanceRequestId", str)
VisitId = NewType("VisitId", str)
CampaignId = NewType("CampaignId", str)
ContactListId = NewType("ContactListId", str)
