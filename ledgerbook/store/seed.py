"""
Seed Data

The document written on first launch, and the blank document written
when the user clears their data.
"""

from datetime import datetime, timezone
from decimal import Decimal

from ledgerbook.models.database import AppMeta, DatabaseSnapshot
from ledgerbook.models.inventory import (
    Collection,
    CollectionItem,
    SchemaField,
    SchemaFieldType,
)
from ledgerbook.models.ledger import (
    LedgerEntry,
    Organization,
    Transaction,
    TransactionType,
)


def build_empty_snapshot(app_version: str = "1.0.0", currency: str = "₹") -> DatabaseSnapshot:
    """A cleared database: no data, onboarding pending."""
    return DatabaseSnapshot(
        meta=AppMeta(
            app_version=app_version,
            user_currency=currency,
            organization_name="",
            is_new_user=True,
        ),
        collections=[],
        ledger=[],
    )


def build_seed_snapshot(app_version: str = "1.0.0", currency: str = "₹") -> DatabaseSnapshot:
    """A small sample database so a first launch is not empty."""
    laptops = Collection(
        name="Laptops",
        description="Refurbished laptops in stock",
        schema_fields=[
            SchemaField(key="name", label="Item Name", type=SchemaFieldType.TEXT, required=True),
            SchemaField(key="sku", label="SKU", type=SchemaFieldType.TEXT),
            SchemaField(key="price", label="Price", type=SchemaFieldType.CURRENCY, required=True),
            SchemaField(
                key="condition",
                label="Condition",
                type=SchemaFieldType.SELECT,
                options=["New", "Good", "Fair"],
                default_value="Good",
            ),
            SchemaField(key="in_stock", label="In Stock", type=SchemaFieldType.BOOLEAN, default_value=True),
            SchemaField(key="purchased_on", label="Purchased On", type=SchemaFieldType.DATE),
        ],
        data=[
            CollectionItem(values={
                "name": "ThinkPad T480",
                "sku": "TP-T480-01",
                "price": 32000,
                "condition": "Good",
                "in_stock": True,
                "purchased_on": "2024-01-15T00:00:00.000Z",
            }),
            CollectionItem(values={
                "name": "MacBook Air M1",
                "sku": "MBA-M1-02",
                "price": 54000,
                "condition": "New",
                "in_stock": False,
            }),
        ],
    )
    spares = Collection(
        name="Spare Parts",
        description="Chargers, batteries and cables",
        schema_fields=[
            SchemaField(key="name", label="Item Name", type=SchemaFieldType.TEXT, required=True),
            SchemaField(key="quantity", label="Quantity", type=SchemaFieldType.NUMBER, default_value=0),
        ],
        data=[
            CollectionItem(values={"name": "65W USB-C Charger", "quantity": 12}),
        ],
    )

    supplier = Organization(name="Sharma Traders", phone="9876543210", email="accounts@sharmatraders.in")
    customer = Organization(name="Anita Verma", phone="9123456780")
    day = datetime(2024, 2, 1, 10, 30, tzinfo=timezone.utc)

    return DatabaseSnapshot(
        meta=AppMeta(
            app_version=app_version,
            user_currency=currency,
            organization_name="",
            is_new_user=False,
        ),
        collections=[laptops, spares],
        ledger=[
            LedgerEntry(
                organization=supplier,
                transactions=[
                    Transaction(
                        organization_id=supplier.id,
                        type=TransactionType.CREDIT,
                        amount=Decimal("45000"),
                        date=day,
                        remark="Stock purchase",
                    ),
                    Transaction(
                        organization_id=supplier.id,
                        type=TransactionType.DEBIT,
                        amount=Decimal("20000"),
                        date=day.replace(day=10),
                        remark="Part payment",
                    ),
                ],
            ),
            LedgerEntry(
                organization=customer,
                transactions=[
                    Transaction(
                        organization_id=customer.id,
                        type=TransactionType.DEBIT,
                        amount=Decimal("32000"),
                        date=day.replace(day=5),
                        remark="ThinkPad T480 on credit",
                    ),
                ],
            ),
        ],
    )
