"""
Ledger Repository

Organizations and their credit/debit transactions. Sibling of the
collection repository under the same database document.
"""

from collections import OrderedDict
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, Iterable, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ledgerbook.audit import AuditLogger, create_correlation_id
from ledgerbook.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from ledgerbook.models.base import utc_now
from ledgerbook.models.ledger import (
    LedgerEntry,
    Organization,
    Transaction,
    TransactionType,
    compute_balance,
)
from ledgerbook.store.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from ledgerbook.store.database import Database


def parse_amount(amount: Union[str, int, float, Decimal]) -> Decimal:
    """
    Read a transaction amount.

    Raises ValidationError unless the amount is a finite, non-negative number.
    """
    if isinstance(amount, bool):
        raise ValidationError("Amount must be a number", ["amount"])
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise ValidationError("Amount must be a number", ["amount"])
    if not value.is_finite():
        raise ValidationError("Amount must be a number", ["amount"])
    if value < 0:
        raise ValidationError("Amount cannot be negative", ["amount"])
    return value


def _first_error(error: PydanticValidationError) -> str:
    """User-facing message for the first failed model field."""
    detail = error.errors()[0]
    location = ".".join(str(part) for part in detail["loc"])
    return f"Invalid {location}: {detail['msg']}"


def _as_aware(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def sorted_transactions(entry: LedgerEntry) -> list[Transaction]:
    """Transactions in chronological order; ties keep insertion order."""
    return sorted(entry.transactions, key=lambda t: _as_aware(t.date))


def group_transactions_by_day(
    entry: LedgerEntry,
    today: Optional[date] = None,
    date_format: str = "%x",
) -> list[tuple[str, list[Transaction]]]:
    """
    Chronological transactions grouped under a day heading.

    Headings are "Today", "Yesterday" or the formatted date, judged
    in local time.
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)
    groups: "OrderedDict[str, list[Transaction]]" = OrderedDict()
    for transaction in sorted_transactions(entry):
        day = _as_aware(transaction.date).astimezone().date()
        if day == today:
            title = "Today"
        elif day == yesterday:
            title = "Yesterday"
        else:
            title = day.strftime(date_format)
        groups.setdefault(title, []).append(transaction)
    return list(groups.items())


def format_compact_amount(amount: Union[Decimal, float, int]) -> str:
    """Short balance label: 1500 -> "1.5k", 950 -> "950"."""
    amount = Decimal(str(amount))
    if abs(amount) >= 1000:
        return f"{amount / 1000:.1f}k"
    normalized = amount.normalize()
    if normalized == normalized.to_integral_value():
        return str(int(normalized))
    return format(normalized, "f")


class LedgerRepository:
    """Ledger store: one entry per organization."""

    def __init__(self, database: "Database", audit_logger: Optional[AuditLogger] = None):
        self._db = database
        self._audit_logger = audit_logger

    @property
    def _entries(self) -> list[LedgerEntry]:
        return self._db.snapshot.ledger

    # -------------------------------------------------------------------------
    # Organizations
    # -------------------------------------------------------------------------

    def list_entries(self) -> list[LedgerEntry]:
        return list(self._entries)

    def list_organizations(self) -> list[Organization]:
        return [entry.organization for entry in self._entries]

    def get_entry(self, organization_id: str) -> Optional[LedgerEntry]:
        for entry in self._entries:
            if entry.organization.id == organization_id:
                return entry
        return None

    def add_organization(
        self,
        name: str,
        phone: Optional[str] = None,
        email: Optional[str] = None,
    ) -> LedgerEntry:
        """Register a counterparty with an empty transaction list."""
        if not name or not name.strip():
            self._reject("organization", None, "Organization name is required", ["name"])

        organization = Organization(
            name=name.strip(),
            phone=phone.strip() if phone and phone.strip() else None,
            email=email.strip() if email and email.strip() else None,
        )
        entry = LedgerEntry(organization=organization)
        self._entries.append(entry)

        self._audit(
            AuditEventType.ORGANIZATION_ADDED,
            organization.id,
            f"Organization added: {organization.name}",
        )
        return entry

    def update_organization(self, organization_id: str, /, **updates: Any) -> Organization:
        """Merge updates (name, phone, email) into an organization."""
        entry = self._require_entry(organization_id)
        allowed = {"name", "phone", "email"}
        unknown = sorted(set(updates) - allowed)
        if unknown:
            raise ValidationError(f"Cannot update {', '.join(unknown)}", unknown)
        if "name" in updates and (not updates["name"] or not str(updates["name"]).strip()):
            self._reject("organization", organization_id, "Organization name is required", ["name"])

        merged = {**entry.organization.model_dump(), **updates}
        try:
            entry.organization = Organization.model_validate(merged)
        except PydanticValidationError as e:
            self._reject("organization", organization_id, _first_error(e), sorted(updates))

        self._audit(
            AuditEventType.ORGANIZATION_UPDATED,
            organization_id,
            "Organization updated",
            {"keys": sorted(updates)},
        )
        return entry.organization

    def delete_organization(self, organization_id: str) -> bool:
        """Remove an organization and its transactions. Unknown ids are a no-op."""
        entry = self.get_entry(organization_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        if self._audit_logger:
            self._audit_logger.log_deleted(
                AuditEventType.ORGANIZATION_DELETED, "organization", organization_id,
            )
        return True

    def filter_entries(self, query: str) -> list[LedgerEntry]:
        """Case-insensitive substring filter over name, phone and email."""
        if not query.strip():
            return list(self._entries)
        needle = query.lower()
        return [
            entry for entry in self._entries
            if needle in entry.organization.name.lower()
            or needle in (entry.organization.phone or "").lower()
            or needle in (entry.organization.email or "").lower()
        ]

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        organization_id: str,
        transaction_type: Union[TransactionType, str],
        amount: Union[str, int, float, Decimal],
        remark: Optional[str] = None,
        when: Optional[datetime] = None,
        tags: Optional[list[str]] = None,
        attachment: Optional[str] = None,
    ) -> Transaction:
        """Append a transaction to an organization's ledger."""
        entry = self._require_entry(organization_id)
        try:
            transaction_type = TransactionType(transaction_type)
        except ValueError:
            self._reject("transaction", None, "Type must be CREDIT or DEBIT", ["type"])
        try:
            value = parse_amount(amount)
        except ValidationError as e:
            self._reject("transaction", None, e.message, e.fields)

        transaction = Transaction(
            organization_id=organization_id,
            type=transaction_type,
            amount=value,
            date=_as_aware(when) if when else utc_now(),
            remark=remark.strip() if remark else None,
            tags=tags,
            attachment=attachment,
        )
        entry.transactions.append(transaction)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.transaction_added(
                organization_id=organization_id,
                transaction_id=transaction.id,
                transaction_type=transaction.type.value,
                amount=str(transaction.amount),
            ))
        return transaction

    def update_transaction(
        self,
        organization_id: str,
        transaction_id: str,
        /,
        **updates: Any,
    ) -> Transaction:
        """Merge updates into a transaction. The amount is re-checked."""
        entry = self._require_entry(organization_id)
        transaction = entry.find_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("transaction", transaction_id)

        if "organization_id" in updates or "id" in updates:
            raise ValidationError("Transaction identity cannot change", ["id"])
        if "amount" in updates:
            updates["amount"] = parse_amount(updates["amount"])
        if isinstance(updates.get("date"), datetime):
            updates["date"] = _as_aware(updates["date"])
        if "type" in updates:
            try:
                updates["type"] = TransactionType(updates["type"])
            except ValueError:
                self._reject("transaction", transaction_id, "Type must be CREDIT or DEBIT", ["type"])

        merged = {**transaction.model_dump(), **updates}
        try:
            updated = Transaction.model_validate(merged)
        except PydanticValidationError as e:
            self._reject("transaction", transaction_id, _first_error(e), sorted(updates))
        index = entry.transactions.index(transaction)
        entry.transactions[index] = updated

        self._audit(
            AuditEventType.TRANSACTION_UPDATED,
            transaction_id,
            "Transaction updated",
            {"organization_id": organization_id, "keys": sorted(updates)},
        )
        return updated

    def delete_transaction(self, organization_id: str, transaction_id: str) -> bool:
        """Remove one transaction. Unknown ids are a no-op."""
        return self.delete_transactions(organization_id, [transaction_id]) == 1

    def delete_transactions(self, organization_id: str, transaction_ids: Iterable[str]) -> int:
        """
        Remove several transactions, one at a time.

        Returns how many were removed.
        """
        entry = self.get_entry(organization_id)
        if entry is None:
            return 0
        correlation_id = create_correlation_id()
        removed = 0
        for transaction_id in list(transaction_ids):
            transaction = entry.find_transaction(transaction_id)
            if transaction is None:
                continue
            entry.transactions.remove(transaction)
            removed += 1
            if self._audit_logger:
                self._audit_logger.log_deleted(
                    AuditEventType.TRANSACTION_DELETED,
                    "transaction",
                    transaction_id,
                    correlation_id,
                )
        return removed

    # -------------------------------------------------------------------------
    # Balances
    # -------------------------------------------------------------------------

    def balance(self, organization_id: str) -> Decimal:
        """Net balance of one organization; unknown ids read as settled."""
        entry = self.get_entry(organization_id)
        if entry is None:
            return Decimal("0")
        return entry.balance

    def total_balance(self) -> Decimal:
        """Sum of every organization's net balance."""
        return sum(
            (compute_balance(entry.transactions) for entry in self._entries),
            Decimal("0"),
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_entry(self, organization_id: str) -> LedgerEntry:
        entry = self.get_entry(organization_id)
        if entry is None:
            raise NotFoundError("organization", organization_id)
        return entry

    def _audit(
        self,
        event_type: AuditEventType,
        entity_id: str,
        description: str,
        details: Optional[dict] = None,
    ) -> None:
        if self._audit_logger is None:
            return
        entity_type = "transaction" if event_type.value.startswith("transaction") else "organization"
        self._audit_logger.log(AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            description=description,
            details=details or {},
        ))

    def _reject(
        self,
        entity_type: str,
        entity_id: Optional[str],
        message: str,
        fields: list[str],
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_validation_failed(entity_type, entity_id, message, fields)
        raise ValidationError(message, fields)
