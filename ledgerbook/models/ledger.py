"""
Ledger Models

Each organization (a customer, supplier or person) owns an ordered list
of CREDIT/DEBIT transactions. The net balance is always derived from
the transactions and never stored.

Sign convention: balance = sum(DEBIT) - sum(CREDIT).
Positive means the organization owes the owner ("YOU WILL GET"),
negative means the owner owes the organization ("YOU WILL GIVE").
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import Field, PlainSerializer

from ledgerbook.models.base import DocumentModel, new_id, utc_now


def _money_to_json(amount: Decimal) -> Union[int, float, str]:
    """JSON number when it is exact, otherwise the decimal string."""
    if amount == amount.to_integral_value():
        return int(amount)
    as_float = float(amount)
    if Decimal(repr(as_float)) == amount:
        return as_float
    return str(amount)


# Amounts are Decimal in memory and numbers on disk unless a float would round them.
Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(_money_to_json, return_type=Union[int, float, str], when_used="json"),
]


class TransactionType(str, Enum):
    """Direction of a ledger movement."""
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class BalanceStatus(str, Enum):
    """What the net balance means for the ledger owner."""
    YOU_WILL_GET = "YOU WILL GET"
    YOU_WILL_GIVE = "YOU WILL GIVE"
    SETTLED = "SETTLED"


class Organization(DocumentModel):
    """A ledger counterparty."""

    id: str = Field(default_factory=new_id)
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class Transaction(DocumentModel):
    """One dated credit or debit against an organization."""

    id: str = Field(default_factory=new_id)
    organization_id: str = Field(
        ...,
        description="Back-reference to the owning organization"
    )
    type: TransactionType
    amount: Money = Field(..., description="Non-negative magnitude")
    date: datetime = Field(default_factory=utc_now)
    remark: Optional[str] = None
    attachment: Optional[str] = None
    tags: Optional[list[str]] = None

    @property
    def signed_amount(self) -> Decimal:
        """Contribution of this transaction to the net balance."""
        if self.type is TransactionType.CREDIT:
            return -self.amount
        return self.amount


class LedgerEntry(DocumentModel):
    """
    An organization paired with its transactions.

    Transactions are kept in insertion order; sort by date for display.
    """

    organization: Organization
    transactions: list[Transaction] = Field(default_factory=list)

    @property
    def balance(self) -> Decimal:
        return compute_balance(self.transactions)

    @property
    def status(self) -> BalanceStatus:
        return balance_status(self.balance)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None


def compute_balance(transactions: list[Transaction]) -> Decimal:
    """Net balance: debits minus credits."""
    return sum((t.signed_amount for t in transactions), Decimal("0"))


def balance_status(balance: Decimal) -> BalanceStatus:
    if balance > 0:
        return BalanceStatus.YOU_WILL_GET
    if balance < 0:
        return BalanceStatus.YOU_WILL_GIVE
    return BalanceStatus.SETTLED
