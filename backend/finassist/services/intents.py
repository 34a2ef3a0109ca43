"""Rule-based intent classification and answer rendering.

Rules are evaluated in the order of ``RULES``; the first predicate that
matches the lower-cased message picks the handler. Several patterns overlap
("top spending categories" also matches the generic spending rule), so the
order is part of the behaviour.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from finassist.services.analytics import Context, budget_status
from finassist.services.date_range import DateRange, resolve_date_range
from finassist.services.formatting import (
    bullet_lines,
    format_currency,
    format_percent,
    numbered_lines,
    pluralize,
    progress_bar,
    section,
)
from finassist.services.records import Transaction

Handler = Callable[[str, Context, DateRange | None], str]
Predicate = Callable[[str, Context], bool]

RECENT_LIMIT = 5
TOP_CATEGORY_LIMIT = 5
BREAKDOWN_LIMIT = 10
RUNWAY_WARNING_MONTHS = 6
BUDGET_WARNING_PERCENT = 90
GOAL_WARNING_DAYS = 30
GOAL_WARNING_PROGRESS = 80
FAST_PACE_FACTOR = 1.2
SLOW_PACE_FACTOR = 0.8

_CATEGORY_SPEND_RE = re.compile(r"\b(spent|spending|spend).*?(on|for)?\s+([a-z\s]+?)(\?|$|this|last|month)")
# Checked before _OWED_TO_ME_RE: "who ... i owe" would also match "who.*owe".
_OWED_BY_ME_RE = re.compile(r"\b(who.*\bi\b.*owe|i owe|borrowed from)\b")
_OWED_TO_ME_RE = re.compile(r"\b(who.*owe|who owes|lent to)\b")


@dataclass(frozen=True, slots=True)
class IntentRule:
    intent: str
    predicate: Predicate
    handler: Handler


def _money(context: Context, amount: float) -> str:
    return format_currency(amount, context.summary.primary_currency)


def _signed_money(context: Context, amount: float) -> str:
    return f"-{_money(context, amount)}" if amount < 0 else _money(context, amount)


def _of_type(context: Context, tx_type: str) -> list[Transaction]:
    return [tx for tx in context.transactions if tx.type == tx_type]


def _in_range(transactions: list[Transaction], date_range: DateRange) -> list[Transaction]:
    return [tx for tx in transactions if date_range.contains(tx.date)]


def _category_lines(context: Context, limit: int) -> list[str]:
    ranked = sorted(context.summary.category_breakdown.items(), key=lambda item: item[1], reverse=True)
    total = context.summary.total_expenses
    lines = []
    for category, amount in ranked[:limit]:
        share = amount / total * 100 if total > 0 else 0.0
        lines.append(f"📊 {category}: {_money(context, amount)} ({format_percent(share)})")
    return lines


def _month_elapsed_percent(context: Context) -> float:
    analytics = context.analytics
    if analytics.days_in_month <= 0:
        return 0.0
    return analytics.day_of_month / analytics.days_in_month * 100


def _average_spent_percent(context: Context) -> float:
    average = context.analytics.avg_monthly_spending
    return context.summary.this_month_expenses / average * 100 if average > 0 else 0.0


def match_category(lowered: str, context: Context) -> str | None:
    """Find the known category a "spent on X" question refers to.

    The phrase after the spend verb is compared with every category name by
    substring containment in both directions; the first hit in breakdown
    order wins.
    """
    match = _CATEGORY_SPEND_RE.search(lowered)
    if match is None:
        return None
    candidate = match.group(3).strip()
    if len(candidate) <= 2:
        return None
    for category in context.summary.category_breakdown:
        name = category.lower()
        if name in candidate or candidate in name:
            return category
    return None


def answer_balance(message: str, context: Context, date_range: DateRange | None) -> str:
    if not context.accounts:
        return "You don't have any accounts set up yet. Add an account to start tracking your balance!"
    lines = "\n".join(
        f"💰 {account.name}: {format_currency(account.balance, account.currency)}"
        for account in context.accounts
    )
    return (
        f"Here's your account balance:\n\n{lines}\n\n"
        f"💵 Total Balance: {_money(context, context.summary.total_balance)}"
    )


def answer_income(message: str, context: Context, date_range: DateRange | None) -> str:
    income = _of_type(context, "income")
    if date_range is not None:
        in_range = _in_range(income, date_range)
        if not in_range:
            return f"You didn't record any income in {date_range.label.lower()}."
        total = sum(tx.amount for tx in in_range)
        return (
            f"Your income in {date_range.label.lower()} was {_money(context, total)}. "
            f"You had {len(in_range)} income {pluralize(len(in_range), 'transaction')}."
        )
    if not income:
        return "You haven't recorded any income yet. Add an income transaction to start tracking!"
    return (
        f"Your total income is {_money(context, context.summary.total_income)}. "
        f"You have {len(income)} income {pluralize(len(income), 'transaction')} recorded."
    )


def answer_top_categories(message: str, context: Context, date_range: DateRange | None) -> str:
    lines = _category_lines(context, TOP_CATEGORY_LIMIT)
    if not lines:
        return "You don't have enough spending data yet to show top categories."
    return section("Here are your top spending categories:", numbered_lines(lines))


def answer_category_breakdown(message: str, context: Context, date_range: DateRange | None) -> str:
    lines = _category_lines(context, BREAKDOWN_LIMIT)
    if not lines:
        return (
            "You don't have any spending by category yet. "
            "Add some expense transactions to see category breakdown!"
        )
    return section("Here's your spending by category:", numbered_lines(lines))


def answer_category_spend(message: str, context: Context, date_range: DateRange | None) -> str:
    category = match_category(message.lower().strip(), context)
    if category is None:
        return answer_expenses(message, context, date_range)
    amount = context.summary.category_breakdown[category]
    return f"You've spent {_money(context, amount)} on {category}."


def answer_expenses(message: str, context: Context, date_range: DateRange | None) -> str:
    expenses = _of_type(context, "expense")
    if date_range is not None:
        in_range = _in_range(expenses, date_range)
        if not in_range:
            return f"You didn't record any expenses in {date_range.label.lower()}."
        total = sum(tx.amount for tx in in_range)
        return (
            f"In {date_range.label.lower()}, you spent {_money(context, total)}. "
            f"You had {len(in_range)} expense {pluralize(len(in_range), 'transaction')}."
        )
    if not expenses:
        return "You haven't recorded any expenses yet. Add an expense transaction to start tracking!"
    return (
        f"Your total expenses are {_money(context, context.summary.total_expenses)}. "
        f"You have {len(expenses)} expense {pluralize(len(expenses), 'transaction')} recorded."
    )


def answer_net(message: str, context: Context, date_range: DateRange | None) -> str:
    net = context.summary.net_amount
    if net > 0:
        return (
            f"Great news! You have a positive net amount of {_money(context, net)}. "
            "That means you're saving money! 💰"
        )
    if net < 0:
        return (
            f"Your net amount is {_money(context, net)} in the negative. "
            "Consider reviewing your expenses to improve your financial health."
        )
    return f"Your income and expenses are balanced at {_money(context, 0)}."


def answer_period_spending(message: str, context: Context, date_range: DateRange | None) -> str:
    summary = context.summary
    last_month = (
        f"Last month you spent {_money(context, summary.last_month_expenses)}."
        if summary.last_month_expenses > 0
        else ""
    )
    if date_range is None:
        return f"This month, you've spent {_money(context, summary.this_month_expenses)}. {last_month}".strip()

    in_range = _in_range(_of_type(context, "expense"), date_range)
    if not in_range:
        return f"You didn't record any expenses in {date_range.label.lower()}."
    total = sum(tx.amount for tx in in_range)
    answer = f"In {date_range.label.lower()}, you spent {_money(context, total)}."
    if date_range.label == "This Month" and last_month:
        answer += f" {last_month}"
    return answer


def answer_accounts(message: str, context: Context, date_range: DateRange | None) -> str:
    if not context.accounts:
        return "You don't have any accounts yet. Add an account to get started!"
    lines = "\n".join(
        f"🏦 {account.name} ({account.type}): {format_currency(account.balance, account.currency)}"
        for account in context.accounts
    )
    count = len(context.accounts)
    return f"You have {count} {pluralize(count, 'account')}:\n\n{lines}"


def answer_transaction_count(message: str, context: Context, date_range: DateRange | None) -> str:
    return (
        f"You have {context.summary.transaction_count} transactions recorded. "
        f"({len(_of_type(context, 'income'))} income, "
        f"{len(_of_type(context, 'expense'))} expenses)"
    )


def answer_recent(message: str, context: Context, date_range: DateRange | None) -> str:
    recent = context.transactions[:RECENT_LIMIT]
    if not recent:
        return "You don't have any transactions yet."
    lines = []
    for tx in recent:
        icon, sign = ("💰", "+") if tx.is_income else ("💸", "-")
        lines.append(f"{icon} {tx.description}: {sign}{_money(context, tx.amount)} ({tx.category})")
    return section("Here are your recent transactions:", "\n".join(lines))


def answer_budget(message: str, context: Context, date_range: DateRange | None) -> str:
    if not context.budgets:
        return (
            "You don't have any budgets set up yet. "
            "Set monthly budgets for categories to track your spending!"
        )
    groups: dict[str, list[str]] = {"over": [], "near_limit": [], "under": []}
    for category, line in context.budgets.items():
        status = budget_status(line)
        if status == "over":
            text = (
                f"{category}: {_money(context, line.spent)} spent "
                f"({_money(context, line.budget)} budget) - Over by {_money(context, line.remaining)}"
            )
        elif status == "near_limit":
            text = (
                f"{category}: {_money(context, line.spent)} / {_money(context, line.budget)} "
                f"({format_percent(line.percent_used)})"
            )
        else:
            text = (
                f"{category}: {_money(context, line.remaining)} remaining "
                f"({format_percent(line.percent_used)} used)"
            )
        groups[status].append(text)

    headers = {
        "over": "⚠️ Over Budget:",
        "near_limit": "📊 On Track (80%+):",
        "under": "✅ Under Budget:",
    }
    blocks = [
        f"{headers[status]}\n{bullet_lines(items)}" for status, items in groups.items() if items
    ]
    return "Here's your budget status:\n\n" + "\n\n".join(blocks)


def answer_savings_goals(message: str, context: Context, date_range: DateRange | None) -> str:
    if not context.savings_goals:
        return "You don't have any savings goals set up yet. Create a savings goal to track your progress!"
    blocks = []
    for goal in context.savings_goals:
        if goal.progress >= 100:
            status = "✅ Completed!"
        elif goal.days_remaining is None:
            status = "No target date"
        elif goal.days_remaining < 0:
            status = "⚠️ Overdue"
        else:
            status = f"{goal.days_remaining} days left"
        blocks.append(
            f"🎯 {goal.name}:\n"
            f"   Progress: {progress_bar(goal.progress)} {format_percent(goal.progress)}\n"
            f"   {_money(context, goal.current_amount)} / {_money(context, goal.target_amount)}\n"
            f"   Remaining: {_money(context, goal.remaining)}\n"
            f"   {status}"
        )
    return section("Here's your savings goals progress:", "\n\n".join(blocks))


def answer_investments(message: str, context: Context, date_range: DateRange | None) -> str:
    investments = context.investments
    if investments.asset_count == 0:
        return "You don't have any investments recorded yet. Add investment assets to track your portfolio!"
    gaining = investments.total_gain_loss >= 0
    icon = "📈" if gaining else "📉"
    label = "gain" if gaining else "loss"
    return (
        "Here's your investment portfolio:\n\n"
        f"💰 Portfolio Value: {_money(context, investments.total_portfolio_value)}\n"
        f"💵 Cost Basis: {_money(context, investments.total_cost_basis)}\n"
        f"{icon} Total {label}: {_money(context, investments.total_gain_loss)}\n"
        f"📊 Return: {format_percent(investments.return_percentage, 2)}\n"
        f"🏦 Assets: {investments.asset_count}"
    )


def answer_trends(message: str, context: Context, date_range: DateRange | None) -> str:
    summary = context.summary
    if summary.last_month_expenses == 0 and summary.this_month_expenses == 0:
        return "You don't have enough spending data to compare months yet."
    difference = summary.this_month_expenses - summary.last_month_expenses
    change = difference / summary.last_month_expenses * 100 if summary.last_month_expenses > 0 else 0.0
    if difference > 0:
        trend = (
            f"📈 Your spending increased by {_money(context, difference)} "
            f"({format_percent(change)}) compared to last month."
        )
    elif difference < 0:
        trend = (
            f"📉 Great! Your spending decreased by {_money(context, difference)} "
            f"({format_percent(abs(change))}) compared to last month."
        )
    else:
        trend = "➡️ Your spending stayed the same compared to last month."
    return (
        "Month-over-Month Comparison:\n\n"
        f"This Month: {_money(context, summary.this_month_expenses)}\n"
        f"Last Month: {_money(context, summary.last_month_expenses)}\n\n"
        f"{trend}"
    )


def answer_forecast(message: str, context: Context, date_range: DateRange | None) -> str:
    analytics = context.analytics
    if analytics.daily_average == 0:
        return (
            "I need more spending data to make accurate forecasts. "
            "Try again after recording some expenses this month."
        )
    days_left = analytics.days_in_month - analytics.day_of_month
    projected = analytics.projected_month_end
    answer = (
        "📊 Spending Forecast:\n\n"
        f"Current spending: {_money(context, context.summary.this_month_expenses)}\n"
        f"Daily average: {_money(context, analytics.daily_average)}\n"
        f"Projected month-end: {_money(context, projected)}\n"
        f"Days remaining: {days_left}\n\n"
    )
    if analytics.avg_monthly_spending > 0:
        variance = projected - analytics.avg_monthly_spending
        variance_pct = variance / analytics.avg_monthly_spending * 100
        if variance > 0:
            answer += (
                f"⚠️ You're projected to spend {_money(context, variance)} more than your average "
                f"({format_percent(variance_pct)} increase)."
            )
        else:
            answer += (
                f"✅ You're on track to spend {_money(context, variance)} less than your average "
                f"({format_percent(abs(variance_pct))} decrease)."
            )
    return answer.rstrip()


def answer_burn_rate(message: str, context: Context, date_range: DateRange | None) -> str:
    analytics = context.analytics
    months = analytics.months_until_zero
    if months is None:
        if analytics.net_monthly_rate > 0:
            return (
                f"✅ Great news! You're saving {_money(context, analytics.net_monthly_rate)} per month. "
                "Your balance is growing!"
            )
        return (
            "I need more data to calculate your burn rate. "
            "Make sure you have income and expense transactions recorded."
        )
    return (
        "🔥 Burn Rate Analysis:\n\n"
        f"Current balance: {_money(context, context.summary.total_balance)}\n"
        f"Monthly net: {_signed_money(context, analytics.net_monthly_rate)}\n"
        f"⚠️ At current spending rate, you'll run out of money in approximately "
        f"{months} {pluralize(months, 'month')}.\n\n"
        "💡 Consider reducing expenses or increasing income to extend your runway."
    )


def answer_anomalies(message: str, context: Context, date_range: DateRange | None) -> str:
    anomalies = context.analytics.category_anomalies
    if not anomalies:
        return "✅ No unusual spending patterns detected this month. Your spending looks normal!"
    lines = "\n".join(
        f"⚠️ {item.category}: {_money(context, item.this_month)} this month "
        f"(avg: {_money(context, item.avg_month)}) - {format_percent(item.increase)} increase"
        for item in anomalies
    )
    return (
        f"🚨 Unusual Spending Detected:\n\n{lines}\n\n"
        "💡 These categories show significantly higher spending than your 3-month average."
    )


def answer_velocity(message: str, context: Context, date_range: DateRange | None) -> str:
    analytics = context.analytics
    if analytics.daily_average == 0:
        return "I need spending data from this month to calculate your spending velocity."
    elapsed = _month_elapsed_percent(context)
    spent = _average_spent_percent(context)
    answer = (
        "⚡ Spending Velocity:\n\n"
        f"Daily average: {_money(context, analytics.daily_average)}\n"
        f"Month progress: {format_percent(elapsed)} "
        f"(day {analytics.day_of_month} of {analytics.days_in_month})\n"
        f"Spent so far: {_money(context, context.summary.this_month_expenses)}\n\n"
    )
    if analytics.avg_monthly_spending > 0:
        if spent > elapsed * FAST_PACE_FACTOR:
            answer += (
                f"⚠️ You're spending faster than usual. You've used {format_percent(spent)} of your "
                f"average monthly spending with only {format_percent(elapsed)} of the month elapsed."
            )
        elif spent < elapsed * SLOW_PACE_FACTOR:
            answer += "✅ You're spending slower than usual. Great job managing your expenses!"
        else:
            answer += "➡️ Your spending pace is on track with your average."
    return answer.rstrip()


def answer_currencies(message: str, context: Context, date_range: DateRange | None) -> str:
    if len(context.currencies) <= 1:
        return (
            f"You're using a single currency ({context.summary.primary_currency}). "
            "Multi-currency analysis is available when you have accounts in different currencies."
        )
    blocks = []
    for currency, totals in context.currencies.items():
        net = format_currency(totals.net, currency)
        blocks.append(
            f"{currency}:\n"
            f"  💰 Balance: {format_currency(totals.balance, currency)}\n"
            f"  📈 Income: {format_currency(totals.income, currency)}\n"
            f"  📉 Expenses: {format_currency(totals.expenses, currency)}\n"
            f"  💵 Net: {'-' if totals.net < 0 else ''}{net}"
        )
    return section("🌍 Multi-Currency Breakdown:", "\n\n".join(blocks))


def answer_recommendations(message: str, context: Context, date_range: DateRange | None) -> str:
    analytics = context.analytics
    tips: list[str] = []

    for category, line in context.budgets.items():
        if line.percent_used >= BUDGET_WARNING_PERCENT:
            tips.append(
                f"⚠️ {category} budget is at {format_percent(line.percent_used)}. "
                "Consider reducing spending or increasing budget."
            )

    if analytics.category_anomalies:
        top = analytics.category_anomalies[0]
        tips.append(
            f"💡 {top.category} spending is {format_percent(top.increase)} above average. "
            "Review recent transactions in this category."
        )

    if analytics.months_until_zero is not None and analytics.months_until_zero < RUNWAY_WARNING_MONTHS:
        tips.append(
            f"🔥 Your runway is only {analytics.months_until_zero} months. "
            "Focus on reducing expenses or increasing income."
        )

    for goal in context.savings_goals:
        if (
            goal.days_remaining is not None
            and 0 < goal.days_remaining < GOAL_WARNING_DAYS
            and goal.progress < GOAL_WARNING_PROGRESS
        ):
            per_day = goal.remaining / goal.days_remaining
            tips.append(f'🎯 "{goal.name}" needs {_money(context, per_day)} per day to meet your target.')

    if analytics.avg_monthly_spending > 0:
        spent = _average_spent_percent(context)
        elapsed = _month_elapsed_percent(context)
        if spent > elapsed * FAST_PACE_FACTOR:
            tips.append(
                f"⚡ You're spending {format_percent(spent)} of your monthly average with only "
                f"{format_percent(elapsed)} of the month elapsed. Slow down spending to stay on track."
            )

    if not tips:
        return "✅ Your finances look healthy! No urgent recommendations at this time. Keep up the good work! 💪"
    return section("💡 Smart Recommendations:", numbered_lines(tips, separator="\n\n"))


def answer_lend_borrow(message: str, context: Context, date_range: DateRange | None) -> str:
    lowered = message.lower()
    active_lent = [r for r in context.lend_borrow if r.direction == "lent" and r.status == "active"]
    active_borrowed = [r for r in context.lend_borrow if r.direction == "borrowed" and r.status == "active"]
    overdue_lent = [r for r in active_lent if r.due_date is not None and r.due_date < context.as_of]

    if not active_lent and not active_borrowed:
        return "You don't have any active lend/borrow records."

    if _OWED_BY_ME_RE.search(lowered):
        if not active_borrowed:
            return "You don't owe anyone money."
        lines = bullet_lines(f"{r.person_name}: {_money(context, r.amount)}" for r in active_borrowed)
        total = sum(r.amount for r in active_borrowed)
        return f"People you owe money to:\n\n{lines}\n\n💸 Total: {_money(context, total)}"

    if _OWED_TO_ME_RE.search(lowered):
        if not active_lent:
            return "No one currently owes you money."
        lines = bullet_lines(f"{r.person_name}: {_money(context, r.amount)}" for r in active_lent)
        total = sum(r.amount for r in active_lent)
        answer = f"People who owe you money:\n\n{lines}\n\n💰 Total: {_money(context, total)}"
        if overdue_lent:
            answer += f"\n\n⚠️ Overdue: {len(overdue_lent)} {pluralize(len(overdue_lent), 'record')}"
        return answer

    parts = []
    if active_lent:
        total = sum(r.amount for r in active_lent)
        count = len(active_lent)
        parts.append(f"💰 You've lent {_money(context, total)} to {count} {pluralize(count, 'person', 'people')}.")
        if overdue_lent:
            verb = "is" if len(overdue_lent) == 1 else "are"
            parts.append(f"⚠️ {len(overdue_lent)} {verb} overdue.")
    if active_borrowed:
        total = sum(r.amount for r in active_borrowed)
        count = len(active_borrowed)
        parts.append(
            f"💸 You've borrowed {_money(context, total)} from {count} {pluralize(count, 'person', 'people')}."
        )
    return "\n".join(parts)


def answer_purchases(message: str, context: Context, date_range: DateRange | None) -> str:
    purchases = context.purchases
    if not purchases:
        return "You don't have any purchases recorded yet."
    total = sum(p.amount for p in purchases)
    planned = [p for p in purchases if p.status == "planned"]
    answer = (
        f"You have {len(purchases)} {pluralize(len(purchases), 'purchase')} recorded, "
        f"totaling {_money(context, total)}."
    )
    if planned:
        verb = "is" if len(planned) == 1 else "are"
        answer += f" {len(planned)} {verb} still planned."
    return answer


def answer_summary(message: str, context: Context, date_range: DateRange | None) -> str:
    summary = context.summary
    lines = [
        f"💰 Total Balance: {_money(context, summary.total_balance)}",
        f"📈 Total Income: {_money(context, summary.total_income)}",
        f"📉 Total Expenses: {_money(context, summary.total_expenses)}",
        f"💵 Net Amount: {_signed_money(context, summary.net_amount)}",
    ]
    if summary.total_income > 0:
        rate = summary.net_amount / summary.total_income * 100
        lines.append(f"📊 Savings Rate: {format_percent(rate)}")
    lines.append(f"🏦 Accounts: {summary.account_count}")
    lines.append(f"📝 Transactions: {summary.transaction_count}")
    return section("Here's your financial summary:", "\n".join(lines))


def answer_help(message: str, context: Context, date_range: DateRange | None) -> str:
    capabilities = [
        "💰 Check your account balances",
        "📈 View your income and expenses",
        "📊 See spending by category",
        "📋 Get your financial summary",
        "🕐 View recent transactions",
        "🤝 Check lend/borrow records",
        "📅 Monthly/weekly/yearly spending analysis",
        "💵 Budget tracking and status",
        "🎯 Savings goals progress",
        "📈 Investment portfolio",
        "📊 Trends and comparisons",
        "🔮 Predictive forecasts",
        "🚨 Anomaly detection",
        "⚡ Spending velocity",
        "🔥 Burn rate analysis",
        "🌍 Multi-currency analysis",
        "💡 Smart recommendations",
    ]
    examples = [
        '"What\'s my balance?"',
        '"Spending forecast"',
        '"Burn rate"',
        '"Any unusual spending?"',
        '"Give me recommendations"',
        '"Multi-currency breakdown"',
    ]
    return (
        "I can help you with:\n\n"
        + "\n".join(capabilities)
        + "\n\n💡 Try asking:\n"
        + bullet_lines(examples)
    )


def answer_fallback(message: str, context: Context, date_range: DateRange | None) -> str:
    topics = [
        "Account balances",
        "Income and expenses",
        "Spending by category",
        "Financial summaries",
        "Recent transactions",
    ]
    return (
        f'I understand you\'re asking about "{message}". I can help you with:\n\n'
        + bullet_lines(topics)
        + '\n\nTry asking: "What\'s my balance?" or "How much did I spend this month?"'
    )


def _pattern(regex: str) -> Predicate:
    compiled = re.compile(regex)
    return lambda lowered, context: compiled.search(lowered) is not None


def _names_category(lowered: str, context: Context) -> bool:
    return match_category(lowered, context) is not None


RULES: tuple[IntentRule, ...] = (
    IntentRule(
        "balance",
        _pattern(r"\b(balance|total balance|how much money|current balance|account balance)\b"),
        answer_balance,
    ),
    IntentRule(
        "income",
        _pattern(r"\b(income|earned|earning|salary|how much.*income|total income)\b"),
        answer_income,
    ),
    IntentRule(
        "top_categories",
        _pattern(r"\b(top|highest|most|biggest).*?(spend|expense|category|categories)\b"),
        answer_top_categories,
    ),
    IntentRule(
        "category_breakdown",
        _pattern(r"\b(spending|spend|expense).*?(by|per|category|categories|breakdown)\b"),
        answer_category_breakdown,
    ),
    IntentRule("category_spend", _names_category, answer_category_spend),
    IntentRule(
        "expenses",
        _pattern(r"\b(expense|spent|spending|how much.*spend|total expense|cost)\b"),
        answer_expenses,
    ),
    IntentRule(
        "net",
        _pattern(r"\b(net|savings|saved|left over|remaining|difference)\b"),
        answer_net,
    ),
    IntentRule(
        "period_spending",
        _pattern(
            r"\b(this month|current month|monthly|per month|last month|previous month"
            r"|this week|last week|this year|last year)\b"
        ),
        answer_period_spending,
    ),
    IntentRule("accounts", _pattern(r"\b(account|accounts|how many.*account)\b"), answer_accounts),
    IntentRule(
        "transaction_count",
        _pattern(r"\b(transaction|transactions|how many.*transaction)\b"),
        answer_transaction_count,
    ),
    IntentRule("recent_transactions", _pattern(r"\b(recent|latest|last|recently)\b"), answer_recent),
    IntentRule(
        "budget",
        _pattern(r"\b(budget|over budget|under budget|budget left|budget remaining)\b"),
        answer_budget,
    ),
    IntentRule(
        "savings_goals",
        _pattern(r"\b(savings goal|savings goals|goal progress|how.*goal|target)\b"),
        answer_savings_goals,
    ),
    IntentRule(
        "investments",
        _pattern(r"\b(investment|portfolio|investments|portfolio value|return|gain|loss)\b"),
        answer_investments,
    ),
    IntentRule(
        "trends",
        _pattern(r"\b(compare|comparison|trend|increase|decrease|more|less|vs|versus)\b"),
        answer_trends,
    ),
    IntentRule(
        "forecast",
        _pattern(r"\b(forecast|prediction|projected|projection|will spend|spending forecast|end of month)\b"),
        answer_forecast,
    ),
    IntentRule(
        "burn_rate",
        _pattern(r"\b(burn rate|runway|how long|months left|until zero|until broke)\b"),
        answer_burn_rate,
    ),
    IntentRule(
        "anomalies",
        _pattern(r"\b(anomaly|unusual|spike|unexpected|abnormal|outlier)\b"),
        answer_anomalies,
    ),
    IntentRule(
        "velocity",
        _pattern(r"\b(velocity|spending rate|daily spending|spending pace|spend per day)\b"),
        answer_velocity,
    ),
    IntentRule(
        "currencies",
        _pattern(r"\b(multi.*currency|currency breakdown|by currency|all currencies|currency analysis)\b"),
        answer_currencies,
    ),
    IntentRule(
        "recommendations",
        _pattern(r"\b(recommend|suggestion|advice|tip|should|what should|how to improve)\b"),
        answer_recommendations,
    ),
    IntentRule(
        "lend_borrow",
        _pattern(r"\b(lent|borrow|loan|owe|owed|lend|who owes|who.*owe)\b"),
        answer_lend_borrow,
    ),
    IntentRule("purchases", _pattern(r"\b(purchase|purchases|bought|buying)\b"), answer_purchases),
    IntentRule(
        "summary",
        _pattern(r"\b(summary|overview|financial health|how.*doing|status)\b"),
        answer_summary,
    ),
    IntentRule("help", _pattern(r"\b(help|what can|what do|how can|assist|support)\b"), answer_help),
)

FALLBACK_INTENT = "fallback"


def match_rule(message: str, context: Context) -> IntentRule | None:
    lowered = message.lower().strip()
    for rule in RULES:
        if rule.predicate(lowered, context):
            return rule
    return None


def classify(message: str, context: Context) -> str:
    rule = match_rule(message, context)
    return rule.intent if rule is not None else FALLBACK_INTENT


def generate_response(message: str, context: Context, date_range: DateRange | None = None) -> str:
    if date_range is None:
        date_range = resolve_date_range(message, context.as_of)
    rule = match_rule(message, context)
    handler = rule.handler if rule is not None else answer_fallback
    return handler(message, context, date_range)
