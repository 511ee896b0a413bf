"""
Reports Module
==============

Read-only aggregation of the shop's cash book for the owner's report
screen: totals, profit margin, income per category, best-selling
products, a day-by-day series and an hour-by-hour one.

All periods are business days (21:00 to 21:00 shop time, see
:mod:`apps.transactions.business_day`), never calendar days, so the
figures match the cash counted at closing.

Classes:
    ReportQueries: Static methods for report queries.

Example:
    Owner dashboard for the current business day::

        from apps.reports.analytics import ReportQueries
        from apps.transactions.business_day import default_clock

        clock = default_clock()
        summary = ReportQueries.summary(
            shop_id=shop.id,
            start=clock.business_day_start(),
            end=clock.business_day_end(),
        )
        print(f"Profit: {summary['profit']} ({summary['margin']}%)")

Note:
    Every method returns plain dictionaries and lists, ready for JSON
    serialization.
"""

from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Sum, Value, IntegerField
from django.db.models.functions import Coalesce

from apps.transactions.business_day import default_clock
from apps.transactions.models import Transaction, TransactionType
from apps.transactions.payments import FAILED_PAYMENT_STATUSES
from .exceptions import InvalidDateRangeError

UNCATEGORIZED = 'Lainnya'
MAX_REPORT_DAYS = 366


def _period(shop_id, start, end):
    """Transactions in ``[start, end)``, minus sales whose payment failed."""
    return Transaction.objects.filter(
        shop_id=shop_id,
        created_at__gte=start,
        created_at__lt=end,
    ).exclude(payment_status__in=FAILED_PAYMENT_STATUSES)


class ReportQueries:
    """
    Queries behind the report endpoints.

    ``start`` and ``end`` are aware datetimes; ``end`` is exclusive.

    Methods:
        summary: Income, expense, profit and margin.
        category_breakdown: Income per category, largest first.
        top_products: Products ranked by revenue.
        daily_series: Income and expense per business-day label.
        hourly_series: Income and expense per hour of one business day.
        range_report: All of the above for a span of business days.
    """

    @staticmethod
    def summary(shop_id, start, end):
        """
        Totals for a period.

        Returns:
            dict: A dictionary containing:
                - income (Decimal): Sum of income transactions.
                - expense (Decimal): Sum of expense transactions.
                - profit (Decimal): ``income - expense`` (may be negative).
                - margin (float): Profit as a percentage of income, one
                  decimal; ``0.0`` when there is no income.
                - transaction_count (int)
        """
        zero = Value(Decimal('0.00'))
        transactions = _period(shop_id, start, end)
        totals = {
            row['type']: row['total']
            for row in transactions.order_by().values('type').annotate(total=Coalesce(Sum('amount'), zero))
        }

        income = totals.get(TransactionType.INCOME, Decimal('0.00'))
        expense = totals.get(TransactionType.EXPENSE, Decimal('0.00'))
        profit = income - expense

        margin = 0.0
        if income > 0:
            margin = float(
                (profit / income * 100).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
            )

        return {
            'income': income,
            'expense': expense,
            'profit': profit,
            'margin': margin,
            'transaction_count': transactions.count(),
        }

    @staticmethod
    def category_breakdown(shop_id, start, end):
        """
        Income per category, largest first.

        Transactions without a category are grouped under ``"Lainnya"``.

        Returns:
            list[dict]: ``{'name': str, 'value': Decimal}`` per category.
        """
        rows = (
            _period(shop_id, start, end)
            .filter(type=TransactionType.INCOME)
            .order_by()
            .values('category')
            .annotate(total=Sum('amount'))
        )

        totals = {}
        for row in rows:
            name = row['category'].strip() or UNCATEGORIZED
            totals[name] = totals.get(name, Decimal('0.00')) + row['total']

        breakdown = [{'name': name, 'value': value} for name, value in totals.items()]
        breakdown.sort(key=lambda entry: (-entry['value'], entry['name']))
        return breakdown

    @staticmethod
    def top_products(shop_id, start, end, limit=5):
        """
        Best-selling products by revenue.

        Returns:
            list[dict]: Each containing ``rank``, ``product_id``, ``name``,
            ``sales`` (units sold) and ``revenue``.
        """
        rows = (
            _period(shop_id, start, end)
            .filter(type=TransactionType.INCOME, product__isnull=False)
            .values('product_id', 'product__name')
            .annotate(
                revenue=Sum('amount'),
                sales=Sum(Coalesce('quantity', Value(1), output_field=IntegerField())),
            )
            .order_by('-revenue', 'product__name')[:limit]
        )

        return [
            {
                'rank': index,
                'product_id': row['product_id'],
                'name': row['product__name'],
                'sales': row['sales'],
                'revenue': row['revenue'],
            }
            for index, row in enumerate(rows, start=1)
        ]

    @staticmethod
    def daily_series(shop_id, start_label, end_label, clock=None):
        """
        Income and expense for every business-day label in the range.

        Labels without transactions are present with zeros, so charts
        never have gaps.

        Args:
            shop_id (UUID): The shop.
            start_label (date): First business-day label, inclusive.
            end_label (date): Last business-day label, inclusive.
            clock (BusinessDayClock, optional): Defaults to the
                settings-configured clock.

        Returns:
            list[dict]: ``{'date', 'income', 'expense'}`` in date order.
        """
        clock = clock or default_clock()
        start = clock.business_day_range_for_label(start_label)[0]
        end = clock.business_day_range_for_label(end_label)[1]

        series = {}
        day = start_label
        while day <= end_label:
            series[day] = {'date': day, 'income': Decimal('0.00'), 'expense': Decimal('0.00')}
            day += timedelta(days=1)

        rows = _period(shop_id, start, end).values_list('type', 'amount', 'created_at')
        for txn_type, amount, created_at in rows:
            label = clock.business_day_label_for(created_at)
            if label in series:
                series[label][txn_type] += amount

        return list(series.values())

    @staticmethod
    def hourly_series(shop_id, start, clock=None):
        """
        Income and expense for each of the 24 hours after ``start``.

        ``start`` is the opening of a business day, so the first bucket is
        the cutoff hour (``"21:00"``) and the last one the hour before the
        next cutoff. Hours are labelled in shop local time.

        Returns:
            list[dict]: ``{'hour': 'HH:00', 'income', 'expense'}``, 24 entries.
        """
        clock = clock or default_clock()
        hour = timedelta(hours=1)

        series = [
            {
                'hour': clock.to_local(start + index * hour).strftime('%H:00'),
                'income': Decimal('0.00'),
                'expense': Decimal('0.00'),
            }
            for index in range(24)
        ]

        rows = _period(shop_id, start, start + 24 * hour).values_list('type', 'amount', 'created_at')
        for txn_type, amount, created_at in rows:
            series[(created_at - start) // hour][txn_type] += amount

        return series

    @staticmethod
    def range_report(shop_id, start_label, end_label, clock=None):
        """
        Full report for business days ``start_label`` to ``end_label``.

        Raises:
            InvalidDateRangeError: If the range is reversed or longer
                than a year.
        """
        if start_label > end_label:
            raise InvalidDateRangeError("start_date must not be after end_date")
        if (end_label - start_label).days + 1 > MAX_REPORT_DAYS:
            raise InvalidDateRangeError(f"Reports cover at most {MAX_REPORT_DAYS} days")

        clock = clock or default_clock()
        start = clock.business_day_range_for_label(start_label)[0]
        end = clock.business_day_range_for_label(end_label)[1]

        return {
            'start_date': start_label,
            'end_date': end_label,
            'start': start,
            'end': end,
            'summary': ReportQueries.summary(shop_id, start, end),
            'category_breakdown': ReportQueries.category_breakdown(shop_id, start, end),
            'top_products': ReportQueries.top_products(shop_id, start, end),
            'daily_series': ReportQueries.daily_series(shop_id, start_label, end_label, clock),
        }
