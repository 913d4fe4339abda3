"""WhatsApp campaign generator."""

import random
from datetime import timedelta

from estate_crm.generators.base import LOCATIONS, BaseGenerator
from estate_crm.messaging import property_message
from estate_crm.models import CampaignContent, ContactList, Property, WhatsAppCampaign
from estate_crm.models.base import CampaignId, ContactListId
from estate_crm.models.enums import (
    CampaignStatus,
    CampaignType,
    ClientRole,
    ClientStatus,
    TargetAudience,
)


class CampaignGenerator(BaseGenerator):
    """Generate campaigns; sent ones have delivery and response counters."""

    def generate_contact_list(self) -> ContactList:
        city = random.choice(list(LOCATIONS)).split(", ")[0]
        role = random.choice([ClientRole.BUYER, ClientRole.TENANT])
        created_at = self.days_ago(30, 200)
        return ContactList(
            list_id=ContactListId(self.uuid()),
            name=f"{city} {role.value}s",
            description=f"Active {role.value}s looking in {city}",
            roles=[role],
            statuses=[ClientStatus.ACTIVE, ClientStatus.PROSPECT],
            locations=[city],
            created_at=created_at,
            updated_at=created_at,
        )

    def generate(
        self,
        properties: list[Property],
        contact_list: ContactList | None = None,
    ) -> WhatsAppCampaign:
        featured = random.sample(properties, k=min(len(properties), random.randint(1, 3)))
        campaign_type = CampaignType.PROPERTY_LISTING if featured else random.choice(list(CampaignType))
        audience = TargetAudience.CUSTOM if contact_list else random.choice(
            [TargetAudience.ALL, TargetAudience.BUYERS, TargetAudience.TENANTS, TargetAudience.OWNERS]
        )
        status = random.choices(list(CampaignStatus), weights=[0.2, 0.2, 0.55, 0.05], k=1)[0]
        created_at = self.days_ago(5, 120)

        recipients = sent = delivered = read = responses = 0
        scheduled_date = sent_date = None
        if status == CampaignStatus.SCHEDULED:
            scheduled_date = self.days_ahead(1, 14)
        elif status == CampaignStatus.SENT:
            sent_date = created_at + timedelta(days=random.randint(0, 3))
            recipients = random.randint(20, 400)
            sent = recipients
            delivered = int(sent * random.uniform(0.85, 1.0))
            read = int(delivered * random.uniform(0.5, 0.9))
            responses = int(read * random.uniform(0.05, 0.3))

        message = property_message(featured[0]) if featured else self.fake.paragraph(nb_sentences=2)
        return WhatsAppCampaign(
            campaign_id=CampaignId(self.uuid()),
            name=f"{campaign_type.value.replace('_', ' ').title()} {created_at:%B %Y}",
            campaign_type=campaign_type,
            status=status,
            target_audience=audience,
            content=CampaignContent(
                message=message,
                property_ids=[p.property_id for p in featured],
                media_urls=[url for p in featured for url in p.photos[:1]],
            ),
            recipient_count=recipients,
            sent_count=sent,
            delivered_count=delivered,
            read_count=read,
            response_count=responses,
            contact_list_id=contact_list.list_id if contact_list else None,
            created_at=created_at,
            scheduled_date=scheduled_date,
            sent_date=sent_date,
            updated_at=sent_date or created_at,
        )
