# accounting/services/financials_service.py

"""
FINANCIAL REPORT AGGREGATOR (READ-ONLY)

Contract:
- revenue      = sum(Sale.total_amount)            (override-aware)
- cogs         = sum(Sale.total_cost)              (frozen at sale time)
- expenses     = sum(Expense.amount) for MANUAL rows only
- wastage_loss = sum(WastageEntry.valuation_at_loss)
- gross_profit = revenue - cogs
- net_profit   = gross_profit - expenses - wastage_loss
- margins are percentages of revenue, 0 when revenue is 0

Reconciliation:
- Restock expenses are NOT operating expenses here: raw material cost reaches
  profit through COGS once the goods are sold.
- Wastage expenses are NOT counted twice: they are the same money as
  wastage_loss.

Output follows the overview contract: floats for major units + ints for minor
units, rounded half-up to 0.01 only here. Reads are advisory snapshots (no
locks, no transaction).
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal

from django.db.models import Count, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date

from accounting.models.expense import Expense
from accounting.services.exceptions import InvalidPeriodError
from costing.money import ZERO, q2, to_major_number, to_minor_int
from sales.models import Sale
from wastage.models import WastageEntry


PRESET_TODAY = "today"
PRESET_THIS_MONTH = "this_month"
PRESET_ALL_TIME = "all_time"
PRESET_CUSTOM = "custom"

PRESETS = (PRESET_TODAY, PRESET_THIS_MONTH, PRESET_ALL_TIME)


@dataclass(frozen=True)
class Period:
    """
    Inclusive calendar-date range. None on either side means unbounded.
    """

    start: date | None = None
    end: date | None = None
    label: str = PRESET_ALL_TIME

    def as_dict(self) -> dict:
        return {
            "label": self.label,
            "start_date": self.start.isoformat() if self.start else None,
            "end_date": self.end.isoformat() if self.end else None,
        }


def _coerce_date(value, field_name: str) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value).strip())
    if parsed is None:
        raise InvalidPeriodError(f"Invalid {field_name} format (YYYY-MM-DD)")
    return parsed


def month_period(year: int, month: int) -> Period:
    try:
        year, month = int(year), int(month)
    except (TypeError, ValueError) as exc:
        raise InvalidPeriodError("year and month must be integers") from exc
    try:
        last_day = calendar.monthrange(year, month)[1]
        start, end = date(year, month, 1), date(year, month, last_day)
    except ValueError as exc:
        raise InvalidPeriodError(f"{year}-{month} is not a valid month (year 1-9999, month 1-12)") from exc
    return Period(start=start, end=end, label=f"{year:04d}-{month:02d}")


def resolve_period(*, preset=None, start=None, end=None, today: date | None = None) -> Period:
    """
    Presets: today, this_month, all_time. Explicit start/end win over a preset.
    """
    today = today or timezone.localdate()

    start_d = _coerce_date(start, "start_date")
    end_d = _coerce_date(end, "end_date")
    if start_d or end_d:
        if start_d and end_d and start_d > end_d:
            raise InvalidPeriodError("start_date cannot be after end_date")
        return Period(start=start_d, end=end_d, label=PRESET_CUSTOM)

    preset = (preset or PRESET_ALL_TIME).strip().lower()
    if preset == PRESET_TODAY:
        return Period(start=today, end=today, label=PRESET_TODAY)
    if preset == PRESET_THIS_MONTH:
        return Period(start=today.replace(day=1), end=today, label=PRESET_THIS_MONTH)
    if preset == PRESET_ALL_TIME:
        return Period(label=PRESET_ALL_TIME)

    raise InvalidPeriodError(f"Unknown period '{preset}'. Use one of: {', '.join(PRESETS)}.")


def _created_between(qs, period: Period):
    if period.start:
        qs = qs.filter(created_at__date__gte=period.start)
    if period.end:
        qs = qs.filter(created_at__date__lte=period.end)
    return qs


def _expense_between(qs, period: Period):
    if period.start:
        qs = qs.filter(expense_date__gte=period.start)
    if period.end:
        qs = qs.filter(expense_date__lte=period.end)
    return qs


def _pct(part: Decimal, whole: Decimal) -> Decimal:
    if whole == ZERO:
        return ZERO
    return part / whole * Decimal("100")


def compute_financials(*, period_start=None, period_end=None, period: Period | None = None) -> dict:
    if period is None:
        period = resolve_period(start=period_start, end=period_end)

    sale_totals = _created_between(Sale.objects.all(), period).aggregate(
        revenue=Sum("total_amount"),
        cogs=Sum("total_cost"),
        sale_count=Count("id"),
    )
    revenue = Decimal(sale_totals["revenue"] or ZERO)
    cogs = Decimal(sale_totals["cogs"] or ZERO)

    operating = _expense_between(
        Expense.objects.filter(source=Expense.Source.MANUAL).exclude(
            category=Expense.Category.WASTAGE
        ),
        period,
    ).aggregate(total=Sum("amount"))
    expenses = Decimal(operating["total"] or ZERO)

    wastage = _created_between(WastageEntry.objects.all(), period).aggregate(
        total=Sum("valuation_at_loss")
    )
    wastage_loss = Decimal(wastage["total"] or ZERO)

    gross_profit = revenue - cogs
    net_profit = gross_profit - expenses - wastage_loss

    gross_margin = _pct(gross_profit, revenue)
    net_margin = _pct(net_profit, revenue)

    amounts = {
        "revenue": revenue,
        "cogs": cogs,
        "expenses": expenses,
        "wastage_loss": wastage_loss,
        "gross_profit": gross_profit,
        "net_profit": net_profit,
    }

    out = {"period": period.as_dict(), "sale_count": sale_totals["sale_count"] or 0}
    for key, value in amounts.items():
        out[key] = to_major_number(value)
    out["gross_margin_pct"] = to_major_number(gross_margin)
    out["net_margin_pct"] = to_major_number(net_margin)
    for key, value in amounts.items():
        out[f"{key}_minor"] = to_minor_int(value)
    return out


def expense_breakdown(*, period: Period | None = None) -> dict:
    """
    Totals per category over every expense row (manual and ledger-emitted),
    largest first.
    """
    period = period or Period()

    rows = (
        _expense_between(Expense.objects.all(), period)
        .values("category")
        .annotate(total=Sum("amount"), count=Count("id"))
    )

    categories = []
    grand_total = ZERO
    for row in rows:
        total = Decimal(row["total"] or ZERO)
        grand_total += total
        categories.append(
            {
                "category": row["category"],
                "count": row["count"],
                "total": to_major_number(total),
                "total_minor": to_minor_int(total),
            }
        )

    categories.sort(key=lambda c: (-c["total_minor"], c["category"]))

    return {
        "period": period.as_dict(),
        "categories": categories,
        "total": to_major_number(grand_total),
        "total_minor": to_minor_int(grand_total),
    }


def _shift_month(first_of_month: date, months_back: int) -> date:
    d = first_of_month
    for _ in range(months_back):
        d = (d - timedelta(days=1)).replace(day=1)
    return d


def monthly_revenue_trend(*, months: int = 6, today: date | None = None) -> list[dict]:
    """
    Revenue per calendar month for the trailing `months` months, oldest first.
    The current (partial) month is the last bucket.
    """
    try:
        months = int(months)
    except (TypeError, ValueError) as exc:
        raise InvalidPeriodError("months must be an integer") from exc
    if months < 1 or months > 36:
        raise InvalidPeriodError("months must be between 1 and 36")

    today = today or timezone.localdate()
    current = today.replace(day=1)

    trend = []
    for back in range(months - 1, -1, -1):
        first = _shift_month(current, back)
        period = month_period(first.year, first.month)
        total = _created_between(Sale.objects.all(), period).aggregate(total=Sum("total_amount"))
        revenue = q2(total["total"] or ZERO)
        trend.append(
            {
                "month": period.label,
                "label": first.strftime("%b %Y"),
                "revenue": to_major_number(revenue),
                "revenue_minor": to_minor_int(revenue),
            }
        )
    return trend


def monthly_report(*, year: int, month: int) -> dict:
    """
    Month-end archive: the financial summary plus the expense breakdown.
    """
    period = month_period(year, month)
    return {
        "summary": compute_financials(period=period),
        "expense_breakdown": expense_breakdown(period=period),
    }
