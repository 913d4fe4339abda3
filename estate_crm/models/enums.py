"""Enumeration types for CRM entities."""

from enum import Enum


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    DUPLEX = "duplex"
    HOUSE = "house"
    BUILDING = "building"
    VILLA = "villa"
    PREMISES = "premises"
    OFFICE = "office"
    LAND = "land"


class PropertyCondition(str, Enum):
    NEW = "new"
    RENOVATED = "renovated"
    GOOD_CONDITION = "good_condition"
    TO_RENOVATE = "to_renovate"


class TransactionType(str, Enum):
    SALE = "sale"
    RENTAL = "rental"
    SEASONAL_RENTAL = "seasonal_rental"


class PropertyStatus(str, Enum):
    AVAILABLE = "available"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"
    ARCHIVED = "archived"


class ClientRole(str, Enum):
    TENANT = "tenant"
    OWNER = "owner"
    BUYER = "buyer"


class ClientStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PROSPECT = "prospect"
    CONVERTED = "converted"
    ARCHIVED = "archived"


class ContactMethod(str, Enum):
    PHONE = "phone"
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    IN_PERSON = "in_person"


class InteractionType(str, Enum):
    CALL = "call"
    APPOINTMENT = "appointment"
    WHATSAPP = "whatsapp"
    EMAIL = "email"
    PROPERTY_VIEWING = "property_viewing"
    CONTRACT_SIGNING = "contract_signing"
    FOLLOW_UP = "follow_up"
    COMPLAINT = "complaint"
    PAYMENT = "payment"


class InteractionOutcome(str, Enum):
    SUCCESSFUL = "successful"
    NO_ANSWER = "no_answer"
    INTERESTED = "interested"
    NOT_INTERESTED = "not_interested"
    FOLLOW_UP_REQUIRED = "follow_up_required"
    CONVERTED = "converted"
    CANCELLED = "cancelled"


class UrgencyLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class NeedsRequestStatus(str, Enum):
    ACTIVE = "active"
    MATCHED = "matched"
    CLOSED = "closed"
    ARCHIVED = "archived"


class UserRole(str, Enum):
    ADMIN = "admin"
    AGENT = "agent"
    ASSISTANT = "assistant"


class VisitStatus(str, Enum):
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"
    RESCHEDULED = "rescheduled"


class VisitType(str, Enum):
    FIRST_VIEWING = "first_viewing"
    SECOND_VIEWING = "second_viewing"
    FINAL_INSPECTION = "final_inspection"
    PROPERTY_EVALUATION = "property_evaluation"
    MAINTENANCE_CHECK = "maintenance_check"
    HANDOVER = "handover"


class VisitOutcome(str, Enum):
    INTERESTED = "interested"
    VERY_INTERESTED = "very_interested"
    NOT_INTERESTED = "not_interested"
    NEEDS_MORE_TIME = "needs_more_time"
    WANTS_SECOND_VIEWING = "wants_second_viewing"
    READY_TO_PROCEED = "ready_to_proceed"
    PRICE_NEGOTIATION = "price_negotiation"


class RentalStatus(str, Enum):
    ACTIVE = "active"
    PENDING = "pending"
    EXPIRED = "expired"
    TERMINATED = "terminated"
    RENEWED = "renewed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    LATE = "late"
    OVERDUE = "overdue"
    PARTIAL = "partial"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CARD = "card"
    MOBILE_PAYMENT = "mobile_payment"


class DocumentType(str, Enum):
    CONTRACT = "contract"
    RECEIPT = "receipt"
    INVENTORY = "inventory"
    INSURANCE = "insurance"
    IDENTITY = "identity"
    INCOME_PROOF = "income_proof"
    OTHER = "other"


class AlertType(str, Enum):
    PAYMENT_DUE = "payment_due"
    PAYMENT_OVERDUE = "payment_overdue"
    CONTRACT_EXPIRING = "contract_expiring"
    MAINTENANCE_REQUIRED = "maintenance_required"
    DOCUMENT_EXPIRING = "document_expiring"
    RENT_INCREASE = "rent_increase"


class AlertPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class MaintenanceCategory(str, Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HEATING = "heating"
    APPLIANCES = "appliances"
    STRUCTURAL = "structural"
    CLEANING = "cleaning"
    GARDEN = "garden"
    SECURITY = "security"
    OTHER = "other"


class MaintenancePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


class MaintenanceStatus(str, Enum):
    REPORTED = "reported"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class CampaignType(str, Enum):
    PROPERTY_LISTING = "property_listing"
    NEWSLETTER = "newsletter"
    PROMOTION = "promotion"
    UPDATE = "update"


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"
    FAILED = "failed"


class TargetAudience(str, Enum):
    ALL = "all"
    BUYERS = "buyers"
    TENANTS = "tenants"
    OWNERS = "owners"
    CUSTOM = "custom"
