from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any

DEFAULT_CURRENCY = "USD"
TRANSFER_TAG = "transfer"

Row = Mapping[str, Any]

_NUMERIC_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_amount(value: Any) -> float:
    """Parse a stored money value, defaulting to 0.0.

    None, NaN, infinities, booleans and strings without a numeric prefix all
    yield 0.0. A string with a numeric prefix parses that prefix, so
    ``"12.50 USD"`` is 12.5.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMERIC_PREFIX_RE.match(value)
        if match is None:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def to_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def parse_moment(value: Any) -> datetime | None:
    """Coerce a stored date/timestamp into a naive UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        return parse_moment(parsed)
    return None


def _text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


@dataclass(frozen=True, slots=True)
class Account:
    id: Any
    name: str
    type: str
    balance: float
    currency: str


@dataclass(frozen=True, slots=True)
class Transaction:
    id: Any
    account_id: Any
    type: str
    amount: float
    category: str
    description: str
    date: datetime | None
    tags: tuple[str, ...] = ()

    @property
    def is_income(self) -> bool:
        return self.type == "income"

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"


@dataclass(frozen=True, slots=True)
class Purchase:
    item_name: str
    amount: float
    status: str


@dataclass(frozen=True, slots=True)
class LendBorrowRecord:
    person_name: str
    amount: float
    direction: str
    status: str
    due_date: datetime | None


@dataclass(frozen=True, slots=True)
class SavingsGoal:
    name: str
    target_amount: float
    current_amount: float
    target_date: datetime | None


@dataclass(frozen=True, slots=True)
class Category:
    name: str
    monthly_budget: float


@dataclass(frozen=True, slots=True)
class InvestmentAsset:
    current_value: float
    cost_basis: float


@dataclass(slots=True)
class NormalizedRecords:
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    purchases: list[Purchase] = field(default_factory=list)
    lend_borrow: list[LendBorrowRecord] = field(default_factory=list)
    savings_goals: list[SavingsGoal] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    investment_assets: list[InvestmentAsset] = field(default_factory=list)


def is_transfer(tags: Sequence[str]) -> bool:
    return any(TRANSFER_TAG in tag for tag in tags)


def normalize_account(row: Row) -> Account:
    return Account(
        id=row.get("id"),
        name=_text(row.get("name"), "Unnamed Account"),
        type=_text(row.get("type"), "other"),
        balance=parse_amount(row.get("balance")),
        currency=_text(row.get("currency"), DEFAULT_CURRENCY),
    )


def normalize_transaction(row: Row) -> Transaction:
    tags = tuple(str(tag) for tag in (row.get("tags") or ()))
    tx_type = _text(row.get("type"), "expense")
    amount = parse_amount(row.get("amount"))
    return Transaction(
        id=row.get("id"),
        account_id=row.get("account_id"),
        type=tx_type,
        amount=abs(amount) if tx_type == "expense" else amount,
        category=_text(row.get("category"), "Uncategorized"),
        description=_text(row.get("description"), "No description"),
        date=parse_moment(row.get("date")) or parse_moment(row.get("created_at")),
        tags=tags,
    )


def normalize_purchase(row: Row) -> Purchase:
    return Purchase(
        item_name=_text(row.get("item_name"), "Unnamed Item"),
        amount=parse_amount(row.get("amount")) or parse_amount(row.get("price")),
        status=_text(row.get("status"), "purchased"),
    )


def normalize_lend_borrow(row: Row) -> LendBorrowRecord:
    return LendBorrowRecord(
        person_name=_text(row.get("person_name"), "Unknown"),
        amount=parse_amount(row.get("amount")),
        direction=_text(row.get("type"), "lent"),
        status=_text(row.get("status"), "active"),
        due_date=parse_moment(row.get("due_date")),
    )


def normalize_savings_goal(row: Row) -> SavingsGoal:
    return SavingsGoal(
        name=_text(row.get("name"), "Unnamed Goal"),
        target_amount=parse_amount(row.get("target_amount")),
        current_amount=parse_amount(row.get("current_amount")),
        target_date=parse_moment(row.get("target_date")),
    )


def normalize_category(row: Row) -> Category:
    return Category(
        name=_text(row.get("name"), "Uncategorized"),
        monthly_budget=parse_amount(row.get("monthly_budget")),
    )


def normalize_investment_asset(row: Row) -> InvestmentAsset:
    return InvestmentAsset(
        current_value=parse_amount(row.get("current_value")) or parse_amount(row.get("total_value")),
        cost_basis=parse_amount(row.get("cost_basis")),
    )


def normalize_snapshot(snapshot: Mapping[str, Sequence[Row]]) -> NormalizedRecords:
    """Turn raw store rows into normalized entities.

    Transfer-tagged transactions are dropped here so that no downstream
    computation counts them as income or expense. Input rows are not mutated.
    """
    transactions = [normalize_transaction(row) for row in snapshot.get("transactions", ())]
    return NormalizedRecords(
        accounts=[normalize_account(row) for row in snapshot.get("accounts", ())],
        transactions=[tx for tx in transactions if not is_transfer(tx.tags)],
        purchases=[normalize_purchase(row) for row in snapshot.get("purchases", ())],
        lend_borrow=[normalize_lend_borrow(row) for row in snapshot.get("lend_borrow", ())],
        savings_goals=[normalize_savings_goal(row) for row in snapshot.get("savings_goals", ())],
        categories=[normalize_category(row) for row in snapshot.get("categories", ())],
        investment_assets=[
            normalize_investment_asset(row) for row in snapshot.get("investment_assets", ())
        ],
    )
