from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes
from apps.accounts.permissions import IsShopMember, IsShopOwner
from apps.transactions.business_day import default_clock
from .analytics import ReportQueries
from .exceptions import InvalidDateRangeError
from .serializers import (
    DateRangeQuerySerializer,
    BusinessDaySerializer,
    TodayReportSerializer,
    RangeReportSerializer,
    ErrorSerializer,
)


def _business_day_info(clock):
    """Current business day of ``clock``; pass a frozen clock."""
    return {
        'label': clock.business_day_label(),
        'start': clock.business_day_start(),
        'end': clock.business_day_end(),
        'ms_until_reset': clock.milliseconds_until_reset(),
        'countdown': clock.format_countdown(),
        'cutoff_hour': clock.cutoff_hour,
    }


@extend_schema(
    responses={200: BusinessDaySerializer},
    description="Current business day window and the countdown to the daily reset.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopMember])
def business_day(request):
    """Current business day - thin HTTP handler."""
    return Response(BusinessDaySerializer(_business_day_info(default_clock().frozen())).data)


@extend_schema(
    responses={200: TodayReportSerializer},
    description="Owner dashboard figures for the current business day.",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopOwner])
def today(request):
    """Today's report - thin HTTP handler."""
    clock = default_clock().frozen()
    shop_id = request.user.shop_id
    start, end = clock.business_day_start(), clock.business_day_end()

    data = {
        'business_day': _business_day_info(clock),
        'summary': ReportQueries.summary(shop_id, start, end),
        'category_breakdown': ReportQueries.category_breakdown(shop_id, start, end),
        'top_products': ReportQueries.top_products(shop_id, start, end),
        'hourly_series': ReportQueries.hourly_series(shop_id, start, clock),
    }
    return Response(TodayReportSerializer(data).data)


@extend_schema(
    parameters=[
        OpenApiParameter('start_date', OpenApiTypes.DATE, description='First business day (YYYY-MM-DD)'),
        OpenApiParameter('end_date', OpenApiTypes.DATE, description='Last business day (YYYY-MM-DD)'),
    ],
    responses={
        200: RangeReportSerializer,
        400: ErrorSerializer,
    },
    description="Report for a range of business days (at most 366).",
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsShopOwner])
def summary(request):
    """Range report - thin HTTP handler."""
    query_serializer = DateRangeQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        data = ReportQueries.range_report(
            shop_id=request.user.shop_id,
            start_label=params['start_date'],
            end_label=params['end_date'],
        )
    except InvalidDateRangeError as e:
        return Response(
            {'error': str(e)},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response(RangeReportSerializer(data).data)
