from rest_framework import serializers


# =============================================================================
# Input serializers
# =============================================================================

class DateRangeQuerySerializer(serializers.Serializer):
    """
    Validate query parameters for the summary report.

    Query Parameters:
        start_date (date): First business-day label (YYYY-MM-DD)
        end_date (date): Last business-day label (YYYY-MM-DD)
    """

    start_date = serializers.DateField()
    end_date = serializers.DateField()


# =============================================================================
# Response serializers (API documentation)
# =============================================================================

class BusinessDaySerializer(serializers.Serializer):
    label = serializers.DateField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    ms_until_reset = serializers.IntegerField()
    countdown = serializers.CharField()
    cutoff_hour = serializers.IntegerField()


class SummarySerializer(serializers.Serializer):
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense = serializers.DecimalField(max_digits=14, decimal_places=2)
    profit = serializers.DecimalField(max_digits=14, decimal_places=2)
    margin = serializers.FloatField()
    transaction_count = serializers.IntegerField()


class CategorySerializer(serializers.Serializer):
    name = serializers.CharField()
    value = serializers.DecimalField(max_digits=14, decimal_places=2)


class TopProductSerializer(serializers.Serializer):
    rank = serializers.IntegerField()
    product_id = serializers.UUIDField()
    name = serializers.CharField()
    sales = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=14, decimal_places=2)


class DailyPointSerializer(serializers.Serializer):
    date = serializers.DateField()
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense = serializers.DecimalField(max_digits=14, decimal_places=2)


class HourlyPointSerializer(serializers.Serializer):
    hour = serializers.CharField()
    income = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense = serializers.DecimalField(max_digits=14, decimal_places=2)


class TodayReportSerializer(serializers.Serializer):
    business_day = BusinessDaySerializer()
    summary = SummarySerializer()
    category_breakdown = CategorySerializer(many=True)
    top_products = TopProductSerializer(many=True)
    hourly_series = HourlyPointSerializer(many=True)


class RangeReportSerializer(serializers.Serializer):
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    summary = SummarySerializer()
    category_breakdown = CategorySerializer(many=True)
    top_products = TopProductSerializer(many=True)
    daily_series = DailyPointSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
