#!/usr/bin/env python3
"""Print matching listings for every open needs request.

Reads the configured store (see ``CrmConfig.from_env``), optionally
refreshing it from the remote API first, and prints one block per
request with its matches and a ready-to-send WhatsApp link.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from estate_crm.config import CrmConfig
from estate_crm.exceptions import CrmError
from estate_crm.logging import setup_logging_from_config
from estate_crm.messaging import format_price, needs_match_message, whatsapp_link
from estate_crm.models.enums import PropertyStatus
from estate_crm.query import filter_needs_requests, match_requests, needs_requests
from estate_crm.remote import RemoteSnapshotSource
from estate_crm.storage import open_store
from estate_crm.store import CrmDataStore

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Match client needs against available listings")
    parser.add_argument(
        "--refresh",
        action="store_true",
        help="Refresh collections from CRM_API_URL before matching",
    )
    parser.add_argument(
        "--urgency",
        default=None,
        help="Only requests with this urgency (low, medium, high, urgent)",
    )
    parser.add_argument(
        "--all-listings",
        action="store_true",
        help="Match against every listing, not only available ones",
    )
    args = parser.parse_args()

    try:
        config = CrmConfig.from_env()
        setup_logging_from_config(config)
    except CrmError as e:
        parser.error(str(e))

    crm = CrmDataStore(open_store(config))
    if args.refresh:
        if not config.remote.enabled:
            parser.error("--refresh needs CRM_API_URL")
        with RemoteSnapshotSource.from_config(config.remote) as source:
            crm.refresh_from_remote(source)

    inventory = crm.properties.all()
    if not args.all_listings:
        inventory = [p for p in inventory if p.status == PropertyStatus.AVAILABLE]

    requests = filter_needs_requests(
        needs_requests(crm.clients.all()),
        {"status": "active", "urgency": args.urgency},
    )
    matches = match_requests(requests, inventory)

    for request in requests:
        found = matches[request.needs_id]
        print(f"\n{request.client_name} ({request.needs.urgency.value}) - {len(found)} match(es)")
        for prop in found:
            print(f"  {prop.property_code:<10} {prop.title:<40} {format_price(prop.price):>16}  {prop.location}")
        if found:
            print(f"  {whatsapp_link(request.client_phone, needs_match_message(request.client_name, len(found)))}")

    logger.info(
        "%d requests, %d with matches, %d listings considered",
        len(requests),
        sum(1 for found in matches.values() if found),
        len(inventory),
    )


if __name__ == "__main__":
    main()
