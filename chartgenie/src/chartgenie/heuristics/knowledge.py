"""Static domain knowledge used by the rule-based diagram path."""

from typing import Dict, List, Tuple

# Table type -> extra field declarations, appended verbatim
TABLE_TYPE_FIELDS: Dict[str, List[str]] = {
    "review": ["int rating", "text comment", "datetime created_at"],
    "category": ["string description", "string slug"],
    "payment": ["decimal amount", "string payment_method", "string status", "datetime processed_at"],
    "address": ["string street", "string city", "string state", "string zip_code", "string country"],
    "inventory": ["int quantity", "int min_threshold", "datetime last_updated"],
    "supplier": ["string company_name", "string contact_person", "string email", "string phone"],
    "pharmacy": ["string address", "string phone", "string license_number"],
    "prescription": ["text medication", "string dosage", "text instructions", "datetime prescribed_date"],
    "department": ["string description", "string location"],
}

GENERIC_FIELDS: List[str] = ["text description", "datetime created_at"]

# New table (lower-case) -> existing entity names it should reference
CONNECTION_RULES: Dict[str, List[str]] = {
    "user": ["USER", "CUSTOMER", "PATIENT", "DOCTOR"],
    "patient": ["DOCTOR", "HOSPITAL"],
    "order": ["USER", "CUSTOMER"],
    "product": ["CATEGORY", "SUPPLIER"],
    "appointment": ["PATIENT", "DOCTOR"],
    "review": ["USER", "PRODUCT"],
    "payment": ["ORDER", "USER"],
    "prescription": ["PATIENT", "DOCTOR"],
}

# (from entity, to entity), both lower-case -> verb phrase
RELATIONSHIP_LABELS: Dict[str, Dict[str, str]] = {
    "user": {"review": "writes", "order": "places", "payment": "makes", "address": "lives_at"},
    "product": {"review": "receives", "category": "belongs_to", "inventory": "has_stock"},
    "order": {"payment": "paid_by", "item": "contains"},
    "patient": {"prescription": "receives", "appointment": "schedules"},
    "doctor": {"prescription": "prescribes", "appointment": "has"},
    "pharmacy": {"prescription": "fills"},
}

# Words a phrasing rule may capture that are never table names
NAME_STOP_WORDS = frozenset(
    ["new", "another", "more", "also", "table", "entity", "and", "or", "the", "a", "an"]
)

# Common business-entity nouns, singular and plural
COMMON_ENTITY_NOUNS = frozenset([
    "user", "users", "customer", "customers", "client", "clients",
    "product", "products", "item", "items", "order", "orders",
    "payment", "payments", "review", "reviews", "comment", "comments",
    "category", "categories", "tag", "tags", "address", "addresses",
    "invoice", "invoices", "bill", "bills", "receipt", "receipts",
    "appointment", "appointments", "booking", "bookings",
    "patient", "patients", "doctor", "doctors", "nurse", "nurses",
    "medication", "medications", "prescription", "prescriptions",
    "department", "departments", "employee", "employees",
    "supplier", "suppliers", "vendor", "vendors", "warehouse", "warehouses",
    "inventory", "stock", "shipment", "shipments", "delivery", "deliveries",
])

# Unambiguous edit verbs
STRONG_MODIFICATION_KEYWORDS: Tuple[str, ...] = (
    "add", "include", "also add", "plus", "and also", "extend", "expand",
    "remove", "delete", "drop", "take out", "get rid of",
    "modify", "change", "update", "edit", "alter", "adjust",
    "connect", "link", "relate", "join", "associate",
    "disconnect", "unlink", "separate",
)

# Need corroborating structural vocabulary to count as an edit
WEAK_MODIFICATION_KEYWORDS: Tuple[str, ...] = (
    "need", "want", "should have", "missing", "forgot",
    "also", "too", "as well", "another", "more",
)

STRUCTURAL_NOUNS: Tuple[str, ...] = ("table", "entity", "field")
