"""Filtering, sorting, matching and statistics over CRM collections."""

from estate_crm.query.filters import (
    filter_campaigns,
    filter_clients,
    filter_documents,
    filter_maintenance,
    filter_needs_requests,
    filter_payments,
    filter_properties,
    filter_records,
    filter_users,
    filter_visits,
)
from estate_crm.query.matching import match_properties, match_requests, needs_requests
from estate_crm.query.sorting import (
    ClientSortOption,
    PropertySortOption,
    UserSortOption,
    VisitSortOption,
    sort_records,
)
from estate_crm.query.stats import count_by, percentages, portfolio_status, sum_by

__all__ = [
    "ClientSortOption",
    "PropertySortOption",
    "UserSortOption",
    "VisitSortOption",
    "count_by",
    "filter_campaigns",
    "filter_clients",
    "filter_documents",
    "filter_maintenance",
    "filter_needs_requests",
    "filter_payments",
    "filter_properties",
    "filter_records",
    "filter_users",
    "filter_visits",
    "match_properties",
    "match_requests",
    "needs_requests",
    "percentages",
    "portfolio_status",
    "sort_records",
]
