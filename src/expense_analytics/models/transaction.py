"""Transaction input model and the expense category lookup table.

Categories are a closed enumeration rather than free-form strings, so a
misspelled category label fails validation instead of silently creating a
new bucket.
"""

from datetime import date as date_type
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ExpenseCategory(str, Enum):
    """Expense categories a transaction can be filed under.

    OTHER is the explicit sentinel for unclassified spend.
    """

    OFFICE_SUPPLIES = "Office Supplies"
    TRANSPORTATION = "Transportation"
    UTILITIES = "Utilities"
    MEALS_ENTERTAINMENT = "Meals & Entertainment"
    EQUIPMENT = "Equipment"
    SERVICES = "Services"
    MARKETING_ADVERTISING = "Marketing & Advertising"
    TRAINING_EDUCATION = "Training & Education"
    MEDICAL_HEALTH = "Medical & Health"
    LEGAL_COMPLIANCE = "Legal & Compliance"
    MAINTENANCE_REPAIRS = "Maintenance & Repairs"
    OTHER = "Other"


CATEGORY_DESCRIPTIONS: dict[ExpenseCategory, str] = {
    ExpenseCategory.OFFICE_SUPPLIES: "Stationery, paper, pens, and other office materials",
    ExpenseCategory.TRANSPORTATION: "Travel expenses, fuel, public transport, taxi fares",
    ExpenseCategory.UTILITIES: "Electricity, water, internet, phone bills",
    ExpenseCategory.MEALS_ENTERTAINMENT: "Business meals, client entertainment, catering",
    ExpenseCategory.EQUIPMENT: "Computers, furniture, machinery, tools",
    ExpenseCategory.SERVICES: "Professional services, consulting, maintenance",
    ExpenseCategory.MARKETING_ADVERTISING: "Promotional materials, advertising costs, marketing campaigns",
    ExpenseCategory.TRAINING_EDUCATION: "Courses, seminars, training materials, certifications",
    ExpenseCategory.MEDICAL_HEALTH: "Medical expenses, health insurance, wellness programs",
    ExpenseCategory.LEGAL_COMPLIANCE: "Legal fees, permits, licenses, regulatory compliance",
    ExpenseCategory.MAINTENANCE_REPAIRS: "Building maintenance, equipment repairs, cleaning services",
    ExpenseCategory.OTHER: "Miscellaneous expenses not covered by other categories",
}

_CATEGORY_BY_LABEL = {category.value.lower(): category for category in ExpenseCategory}


def parse_category(label: str) -> ExpenseCategory:
    """Resolve a category label, ignoring case and surrounding whitespace.

    Args:
        label: Category label as entered by a user or upstream system

    Returns:
        The matching ExpenseCategory

    Raises:
        ValueError: If the label does not name a known category
    """
    if isinstance(label, ExpenseCategory):
        return label
    key = (label or "").strip().lower()
    try:
        return _CATEGORY_BY_LABEL[key]
    except KeyError:
        raise ValueError(f"Unknown expense category: {label!r}") from None


def get_category_description(category: ExpenseCategory) -> str:
    """Return the human-readable description for a category."""
    return CATEGORY_DESCRIPTIONS[category]


class Transaction(BaseModel):
    """A single dated, categorized expense record.

    Read-only input to the engine. Amounts are non-negative: the engine
    only sees spend, refunds are the intake layer's concern.
    """

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "rcpt-0001",
                    "date": "2025-01-15",
                    "amount": "42.50",
                    "category": "Meals & Entertainment",
                    "vendor": "Starbucks",
                    "title": "Client coffee",
                }
            ]
        },
    }

    id: str = Field(min_length=1, description="Unique transaction identifier")
    date: date_type = Field(description="The date the expense was incurred")
    amount: Decimal = Field(
        ge=Decimal("0"),
        description="Expense amount; never negative",
    )
    category: ExpenseCategory = Field(
        description="Category the expense is filed under; use Other for unclassified spend",
    )
    vendor: Optional[str] = Field(
        default=None,
        description="Vendor name from receipt metadata, if known",
    )
    title: Optional[str] = Field(
        default=None,
        description="Short free-text title of the receipt",
    )

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal and reject NaN/Infinity."""
        if isinstance(v, (str, float)):
            try:
                v = Decimal(str(v).strip())
            except InvalidOperation:
                raise ValueError(f"amount is not a number: {v!r}") from None
        if isinstance(v, Decimal) and not v.is_finite():
            raise ValueError("amount must be a finite number")
        return v

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category_label(cls, v):
        """Accept category labels in any letter case."""
        if isinstance(v, str):
            return parse_category(v)
        return v

    @field_validator("vendor", "title")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Normalize blank optional strings to None."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @property
    def month_key(self) -> str:
        """Calendar month bucket key in YYYY-MM form."""
        return self.date.strftime("%Y-%m")
