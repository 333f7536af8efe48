"""Field type catalog: every type the classifiers may emit, grouped by category."""

from typing import Final

UNKNOWN: Final = "unknown"

# Field type → category
FIELD_TYPE_CATEGORIES: dict[str, str] = {
    # Documents
    "cpf": "document",
    "cnpj": "document",
    "cpf-cnpj": "document",
    "rg": "document",
    "passport": "document",
    "cnh": "document",
    "pis": "document",
    "national-id": "document",
    "tax-id": "document",
    # Personal
    "name": "personal",
    "first-name": "personal",
    "last-name": "personal",
    "full-name": "personal",
    "birth-date": "personal",
    # Contact
    "email": "contact",
    "phone": "contact",
    "mobile": "contact",
    "whatsapp": "contact",
    "website": "contact",
    "url": "contact",
    # Address
    "address": "address",
    "street": "address",
    "house-number": "address",
    "complement": "address",
    "neighborhood": "address",
    "city": "address",
    "state": "address",
    "country": "address",
    "cep": "address",
    "zip-code": "address",
    # Dates
    "date": "generic",
    "start-date": "generic",
    "end-date": "generic",
    "due-date": "generic",
    # Financial
    "money": "financial",
    "price": "financial",
    "amount": "financial",
    "discount": "financial",
    "tax": "financial",
    "number": "financial",
    "credit-card-number": "financial",
    "credit-card-expiration": "financial",
    "credit-card-cvv": "financial",
    "pix-key": "financial",
    # Commerce
    "company": "ecommerce",
    "supplier": "ecommerce",
    "product": "ecommerce",
    "product-name": "ecommerce",
    "sku": "ecommerce",
    "quantity": "ecommerce",
    "coupon": "ecommerce",
    # Professional
    "employee-count": "professional",
    "job-title": "professional",
    "department": "professional",
    # Authentication
    "username": "authentication",
    "password": "authentication",
    "confirm-password": "authentication",
    "otp": "authentication",
    "verification-code": "authentication",
    # Free text
    "text": "generic",
    "description": "generic",
    "notes": "generic",
    # Widgets
    "search": "system",
    "select": "system",
    "checkbox": "system",
    "radio": "system",
    "file": "system",
    UNKNOWN: "unknown",
}

FIELD_TYPES: frozenset[str] = frozenset(FIELD_TYPE_CATEGORIES)

# Labels the network may be trained on, in output order.
TRAINABLE_LABELS: tuple[str, ...] = (
    "cpf",
    "cnpj",
    "cpf-cnpj",
    "rg",
    "email",
    "phone",
    "name",
    "first-name",
    "last-name",
    "full-name",
    "address",
    "street",
    "city",
    "state",
    "cep",
    "zip-code",
    "date",
    "birth-date",
    "password",
    "username",
    "company",
    "website",
    "product",
    "supplier",
    "employee-count",
    "job-title",
    "money",
    "number",
    "text",
)


def is_known_type(field_type: str) -> bool:
    return field_type in FIELD_TYPES


def category_of(field_type: str) -> str:
    """Return the category of a field type ("unknown" when not catalogued)."""
    return FIELD_TYPE_CATEGORIES.get(field_type, "unknown")
