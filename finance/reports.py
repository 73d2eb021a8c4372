# finance/reports.py
# ─────────────────────────────────────────────────────────────────────────────
# Read-side helpers shared by the transaction list and summary endpoints:
#   • filter_transactions – apply the query-string filters to a queryset
#   • calculate_summary   – income / expense / balance / count
#   • group_by_category   – totals per category, biggest first
# ─────────────────────────────────────────────────────────────────────────────

from datetime import date
from decimal import Decimal

from django.db.models import Q

UNKNOWN_COLOR = "#999999"


def _parse_yyyymmdd(s):
    """Turn '2025-10-01' into a date object; return None if missing or invalid."""
    try:
        return date.fromisoformat((s or "").strip())
    except ValueError:
        return None


def read_filters(params):
    """Normalise filters from a QueryDict (missing → empty string)."""
    return {
        "ledgerId": (params.get("ledgerId") or "").strip(),
        "type": (params.get("type") or "All").strip(),
        "category": (params.get("category") or "").strip(),
        "startDate": (params.get("startDate") or "").strip(),
        "endDate": (params.get("endDate") or "").strip(),
        "q": (params.get("q") or "").strip(),
    }


def filter_transactions(qs, filters):
    """
    Narrow a Transaction queryset.
      type      "Income" | "Expense" ("All"/anything else → no filter)
      category  category name, exact
      startDate / endDate  inclusive YYYY-MM-DD bounds (bad dates ignored)
      q         case-insensitive match on description OR category name
    """
    if filters.get("ledgerId"):
        try:
            qs = qs.filter(ledger_id=int(filters["ledgerId"]))
        except ValueError:
            return qs.none()

    if filters.get("type") in ("Income", "Expense"):
        qs = qs.filter(type=filters["type"])

    if filters.get("category"):
        qs = qs.filter(category__name=filters["category"])

    start = _parse_yyyymmdd(filters.get("startDate"))
    if start:
        qs = qs.filter(date__gte=start)
    end = _parse_yyyymmdd(filters.get("endDate"))
    if end:
        qs = qs.filter(date__lte=end)

    if filters.get("q"):
        q = filters["q"]
        qs = qs.filter(Q(description__icontains=q) | Q(category__name__icontains=q))

    return qs


def calculate_summary(transactions):
    """Totals over an iterable of transactions; Decimal math so balance is exact."""
    total_income = Decimal("0")
    total_expense = Decimal("0")
    count = 0
    for tx in transactions:
        count += 1
        amount = Decimal(str(tx.amount))
        if tx.type == "Income":
            total_income += amount
        elif tx.type == "Expense":
            total_expense += amount
    return {
        "totalIncome": total_income,
        "totalExpense": total_expense,
        "balance": total_income - total_expense,
        "transactionCount": count,
    }


def group_by_category(transactions):
    """[{category, amount, color}] summed per category name, largest amount first."""
    grouped = {}
    for tx in transactions:
        category = tx.category
        name = category.name if category else ""
        entry = grouped.get(name)
        if entry is None:
            entry = grouped[name] = {
                "category": name,
                "amount": Decimal("0"),
                "color": (category.color if category else "") or UNKNOWN_COLOR,
            }
        entry["amount"] += Decimal(str(tx.amount))
    return sorted(grouped.values(), key=lambda row: row["amount"], reverse=True)
