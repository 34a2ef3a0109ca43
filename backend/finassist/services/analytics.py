from __future__ import annotations

import calendar
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from finassist.services.date_range import previous_month, shift_month
from finassist.services.records import (
    DEFAULT_CURRENCY,
    Account,
    Category,
    InvestmentAsset,
    LendBorrowRecord,
    NormalizedRecords,
    Purchase,
    SavingsGoal,
    Transaction,
    to_naive_utc,
)

HISTORY_MONTHS = 6
ANOMALY_WINDOW_MONTHS = 3
ANOMALY_THRESHOLD = 1.5
NEAR_LIMIT_RATIO = 0.8
SECONDS_PER_DAY = 86400

BudgetStatus = Literal["over", "near_limit", "under"]


@dataclass(slots=True)
class Summary:
    total_balance: float = 0.0
    total_income: float = 0.0
    total_expenses: float = 0.0
    net_amount: float = 0.0
    account_count: int = 0
    transaction_count: int = 0
    category_breakdown: dict[str, float] = field(default_factory=dict)
    this_month_expenses: float = 0.0
    last_month_expenses: float = 0.0
    primary_currency: str = DEFAULT_CURRENCY


@dataclass(slots=True)
class BudgetLine:
    budget: float
    spent: float

    @property
    def remaining(self) -> float:
        return self.budget - self.spent

    @property
    def percent_used(self) -> float:
        return self.spent / self.budget * 100 if self.budget > 0 else 0.0


@dataclass(slots=True)
class GoalProgress:
    name: str
    target_amount: float
    current_amount: float
    progress: float
    remaining: float
    days_remaining: int | None
    target_date: datetime | None


@dataclass(slots=True)
class InvestmentSummary:
    total_portfolio_value: float = 0.0
    total_cost_basis: float = 0.0
    total_gain_loss: float = 0.0
    return_percentage: float = 0.0
    asset_count: int = 0


@dataclass(slots=True)
class MonthSpend:
    month: str
    amount: float
    year: int
    month_num: int


@dataclass(slots=True)
class CategoryAnomaly:
    category: str
    this_month: float
    avg_month: float
    increase: float


@dataclass(slots=True)
class SpendingAnalytics:
    monthly_spending: list[MonthSpend] = field(default_factory=list)
    avg_monthly_spending: float = 0.0
    daily_average: float = 0.0
    projected_month_end: float = 0.0
    monthly_income: float = 0.0
    net_monthly_rate: float = 0.0
    months_until_zero: int | None = None
    category_anomalies: list[CategoryAnomaly] = field(default_factory=list)
    day_of_month: int = 0
    days_in_month: int = 0


@dataclass(slots=True)
class CurrencyTotals:
    balance: float = 0.0
    income: float = 0.0
    expenses: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses


@dataclass(slots=True)
class Context:
    as_of: datetime
    accounts: list[Account] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    purchases: list[Purchase] = field(default_factory=list)
    lend_borrow: list[LendBorrowRecord] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)
    budgets: dict[str, BudgetLine] = field(default_factory=dict)
    savings_goals: list[GoalProgress] = field(default_factory=list)
    investments: InvestmentSummary = field(default_factory=InvestmentSummary)
    analytics: SpendingAnalytics = field(default_factory=SpendingAnalytics)
    currencies: dict[str, CurrencyTotals] = field(default_factory=dict)


def empty_context(as_of: datetime) -> Context:
    return Context(as_of=to_naive_utc(as_of))


def _in_month(tx: Transaction, year: int, month: int) -> bool:
    return tx.date is not None and tx.date.year == year and tx.date.month == month


def _month_total(transactions: Iterable[Transaction], year: int, month: int) -> float:
    return sum(tx.amount for tx in transactions if _in_month(tx, year, month))


def summarize(records: NormalizedRecords, now: datetime) -> Summary:
    income = [tx for tx in records.transactions if tx.is_income]
    expenses = [tx for tx in records.transactions if tx.is_expense]

    breakdown: dict[str, float] = {}
    for tx in expenses:
        breakdown[tx.category] = breakdown.get(tx.category, 0.0) + tx.amount

    total_income = sum(tx.amount for tx in income)
    total_expenses = sum(tx.amount for tx in expenses)
    last_year, last_month = previous_month(now.year, now.month)
    return Summary(
        total_balance=sum(account.balance for account in records.accounts),
        total_income=total_income,
        total_expenses=total_expenses,
        net_amount=total_income - total_expenses,
        account_count=len(records.accounts),
        transaction_count=len(records.transactions),
        category_breakdown=breakdown,
        this_month_expenses=_month_total(expenses, now.year, now.month),
        last_month_expenses=_month_total(expenses, last_year, last_month),
        primary_currency=records.accounts[0].currency if records.accounts else DEFAULT_CURRENCY,
    )


def budget_lines(categories: Sequence[Category], breakdown: dict[str, float]) -> dict[str, BudgetLine]:
    budgets: dict[str, BudgetLine] = {}
    for category in categories:
        if category.monthly_budget > 0:
            budgets[category.name] = BudgetLine(
                budget=category.monthly_budget,
                spent=breakdown.get(category.name, 0.0),
            )
    return budgets


def budget_status(line: BudgetLine) -> BudgetStatus:
    if line.spent > line.budget:
        return "over"
    if line.percent_used >= NEAR_LIMIT_RATIO * 100:
        return "near_limit"
    return "under"


def goal_progress(goals: Sequence[SavingsGoal], now: datetime) -> list[GoalProgress]:
    progress_list: list[GoalProgress] = []
    for goal in goals:
        progress = goal.current_amount / goal.target_amount * 100 if goal.target_amount > 0 else 0.0
        days_remaining = None
        if goal.target_date is not None:
            seconds = (goal.target_date - now).total_seconds()
            days_remaining = math.ceil(seconds / SECONDS_PER_DAY)
        progress_list.append(
            GoalProgress(
                name=goal.name,
                target_amount=goal.target_amount,
                current_amount=goal.current_amount,
                progress=min(100.0, max(0.0, progress)),
                remaining=goal.target_amount - goal.current_amount,
                days_remaining=days_remaining,
                target_date=goal.target_date,
            )
        )
    return progress_list


def investment_summary(assets: Sequence[InvestmentAsset]) -> InvestmentSummary:
    portfolio = sum(asset.current_value for asset in assets)
    cost_basis = sum(asset.cost_basis for asset in assets)
    gain_loss = portfolio - cost_basis
    return InvestmentSummary(
        total_portfolio_value=portfolio,
        total_cost_basis=cost_basis,
        total_gain_loss=gain_loss,
        return_percentage=gain_loss / cost_basis * 100 if cost_basis > 0 else 0.0,
        asset_count=len(assets),
    )


def monthly_history(
    expenses: Sequence[Transaction], now: datetime, months: int = HISTORY_MONTHS
) -> list[MonthSpend]:
    history: list[MonthSpend] = []
    for offset in range(months):
        year, month = shift_month(now.year, now.month, offset)
        history.append(
            MonthSpend(
                month=calendar.month_name[month],
                amount=_month_total(expenses, year, month),
                year=year,
                month_num=month,
            )
        )
    return history


def category_anomalies(
    expenses: Sequence[Transaction],
    categories: Iterable[str],
    now: datetime,
) -> list[CategoryAnomaly]:
    """Flag categories whose spend this month exceeds 1.5x their 3-month average.

    The average covers the current and the two previous calendar months.
    """
    window = [shift_month(now.year, now.month, offset) for offset in range(ANOMALY_WINDOW_MONTHS)]
    anomalies: list[CategoryAnomaly] = []
    for category in categories:
        in_category = [tx for tx in expenses if tx.category == category]
        totals = [_month_total(in_category, year, month) for year, month in window]
        avg = sum(totals) / ANOMALY_WINDOW_MONTHS
        this_month = totals[0]
        if avg > 0 and this_month > avg * ANOMALY_THRESHOLD:
            anomalies.append(
                CategoryAnomaly(
                    category=category,
                    this_month=this_month,
                    avg_month=avg,
                    increase=(this_month - avg) / avg * 100,
                )
            )
    return anomalies


def spending_analytics(records: NormalizedRecords, summary: Summary, now: datetime) -> SpendingAnalytics:
    expenses = [tx for tx in records.transactions if tx.is_expense]
    income = [tx for tx in records.transactions if tx.is_income]

    history = monthly_history(expenses, now)
    avg_monthly = sum(item.amount for item in history) / len(history) if history else 0.0

    days_in_month = calendar.monthrange(now.year, now.month)[1]
    day_of_month = now.day
    daily_average = summary.this_month_expenses / day_of_month if day_of_month > 0 else 0.0

    monthly_income = _month_total(income, now.year, now.month)
    net_monthly_rate = monthly_income - summary.this_month_expenses
    months_until_zero = None
    if net_monthly_rate < 0 and summary.total_balance > 0:
        months_until_zero = math.floor(summary.total_balance / abs(net_monthly_rate))

    return SpendingAnalytics(
        monthly_spending=history,
        avg_monthly_spending=avg_monthly,
        daily_average=daily_average,
        projected_month_end=daily_average * days_in_month,
        monthly_income=monthly_income,
        net_monthly_rate=net_monthly_rate,
        months_until_zero=months_until_zero,
        category_anomalies=category_anomalies(expenses, summary.category_breakdown, now),
        day_of_month=day_of_month,
        days_in_month=days_in_month,
    )


def currency_breakdown(
    accounts: Sequence[Account], transactions: Sequence[Transaction]
) -> dict[str, CurrencyTotals]:
    account_currency = {account.id: account.currency for account in accounts if account.id is not None}
    breakdown: dict[str, CurrencyTotals] = {}
    for account in accounts:
        totals = breakdown.setdefault(account.currency, CurrencyTotals())
        totals.balance += account.balance
    for tx in transactions:
        currency = account_currency.get(tx.account_id)
        if currency is None:
            continue
        if tx.is_income:
            breakdown[currency].income += tx.amount
        elif tx.is_expense:
            breakdown[currency].expenses += tx.amount
    return breakdown


def build_context(records: NormalizedRecords, now: datetime) -> Context:
    """Derive the full analytics Context from one normalized snapshot.

    ``now`` is the only clock reading; every section is anchored to it so the
    same snapshot and instant always produce an identical Context.
    """
    now = to_naive_utc(now)
    summary = summarize(records, now)
    return Context(
        as_of=now,
        accounts=list(records.accounts),
        transactions=list(records.transactions),
        purchases=list(records.purchases),
        lend_borrow=list(records.lend_borrow),
        summary=summary,
        budgets=budget_lines(records.categories, summary.category_breakdown),
        savings_goals=goal_progress(records.savings_goals, now),
        investments=investment_summary(records.investment_assets),
        analytics=spending_analytics(records, summary, now),
        currencies=currency_breakdown(records.accounts, records.transactions),
    )
