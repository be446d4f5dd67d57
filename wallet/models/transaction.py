"""
Core Data Models for Wallet

These models define the schemas for all data exchanged with the
transaction service. They are designed to:
1. Validate server payloads at the boundary
2. Keep fields the client does not know about (the server owns the schema)
3. Serialize back to the exact wire shape the service expects

DESIGN DECISION: Wire keys stay snake_case, as the service sends them.
The one exception is the summary's `byCategory`, which is aliased.
"""

from decimal import Decimal
from typing import Annotated, Any, Iterable, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
)


# Amounts are exact locally but travel as JSON numbers
Amount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]

INCOME_CATEGORY = "income"
MISSING_DATE_PLACEHOLDER = "—"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    One ledger entry as stored by the remote service.

    Sign convention for `amount` is owned by the caller; use `is_income`
    rather than the sign to classify an entry.
    """
    model_config = ConfigDict(extra="allow")

    id: int = Field(
        ...,
        description="Server-assigned identifier, immutable"
    )
    user_id: str = Field(
        ...,
        description="Owner of the entry"
    )
    title: str = Field(
        ...,
        description="Human label"
    )
    amount: Amount = Field(
        ...,
        description="Signed amount"
    )
    category: str = Field(
        ...,
        description="Category label, also drives income classification"
    )
    created_at: Optional[str] = Field(
        default=None,
        description="Creation timestamp as sent by the server"
    )

    @property
    def kind(self) -> Optional[str]:
        """Server-supplied `type` field, if the service sent one."""
        value = (self.model_extra or {}).get("type")
        return str(value) if value is not None else None

    @property
    def is_income(self) -> bool:
        """
        Classify the entry as income or expense.

        An explicit `type` from the server wins; otherwise the
        category decides.
        """
        if self.kind is not None:
            return self.kind.lower() == INCOME_CATEGORY
        return self.category.strip().lower() == INCOME_CATEGORY

    @property
    def display_date(self) -> str:
        return self.created_at or MISSING_DATE_PLACEHOLDER

    def merged(self, update: "TransactionUpdate") -> "Transaction":
        """Return a copy with the update's fields laid over this entry."""
        return self.model_copy(update=update.changes())


class TransactionUpdate(BaseModel):
    """
    Partial update payload.

    Only title, amount and category may be changed by the client.
    Unknown keys are rejected before anything is sent. Values go out
    exactly as the caller gave them.
    """
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(
        default=None,
        min_length=1,
        description="New label"
    )
    amount: Optional[Amount] = Field(
        default=None,
        description="New signed amount"
    )
    category: Optional[str] = Field(
        default=None,
        min_length=1,
        description="New category"
    )

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually provided, as Python values."""
        return self.model_dump(exclude_unset=True, exclude_none=True)

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready request body."""
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


def ensure_unique_ids(transactions: Iterable[Transaction]) -> list[Transaction]:
    """
    Materialize a transaction sequence, rejecting duplicate ids.

    Raises:
        ValueError: If two entries share an id
    """
    items = list(transactions)
    seen: set[int] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate transaction id in list: {item.id}")
        seen.add(item.id)
    return items


# =============================================================================
# SUMMARY
# =============================================================================

class CategoryTotal(BaseModel):
    """Aggregate for one category, as computed by the server."""
    model_config = ConfigDict(extra="allow")

    category: str
    total_amount: Amount
    count: int = Field(..., ge=0)


class TransactionsSummary(BaseModel):
    """
    Server-computed aggregate over a user's transactions.

    `by_category` keeps the server's order; nothing here re-sorts it.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    total_amount: Amount = Field(
        ...,
        description="Net balance"
    )
    count: int = Field(
        ...,
        ge=0,
        description="Total number of transactions"
    )
    by_category: list[CategoryTotal] = Field(
        default_factory=list,
        alias="byCategory",
        description="Per-category totals in server order"
    )


class BalanceSummary(BaseModel):
    """
    Balance card figures derived from a summary.

    `expenses` is a magnitude: the sign is implied by the label.
    """

    balance: Decimal = Decimal("0")
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @classmethod
    def from_summary(cls, summary: Optional[TransactionsSummary]) -> "BalanceSummary":
        if summary is None:
            return cls()

        income = sum(
            (row.total_amount for row in summary.by_category
             if row.category.strip().lower() == INCOME_CATEGORY),
            Decimal("0"),
        )
        expenses = sum(
            (row.total_amount for row in summary.by_category
             if row.category and row.category.strip().lower() != INCOME_CATEGORY),
            Decimal("0"),
        )

        return cls(
            balance=summary.total_amount,
            income=income,
            expenses=abs(expenses),
        )
