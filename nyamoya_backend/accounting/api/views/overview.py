# accounting/api/views/overview.py

"""
ANALYTICS / ARCHIVE API VIEWS

GET /api/accounting/revenue-trend/?months=6
GET /api/accounting/expense-breakdown/?period=this_month
GET /api/accounting/monthly-report/?year=2026&month=3
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.views._params import PERIOD_PARAMETERS, period_from_request
from accounting.services.exceptions import InvalidPeriodError
from accounting.services.financials_service import (
    expense_breakdown,
    monthly_report,
    monthly_revenue_trend,
)
from costing.api import error_response
from costing.exceptions import CostingError
from users.permissions import IsAdmin


class RevenueTrendView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(
                name="months",
                type=int,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Trailing calendar months, current month last (default 6).",
            ),
        ],
        responses={200: dict},
    )
    def get(self, request):
        try:
            trend = monthly_revenue_trend(months=request.query_params.get("months") or 6)
        except CostingError as exc:
            return error_response(exc)
        return Response({"months": trend}, status=status.HTTP_200_OK)


class ExpenseBreakdownView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(tags=["accounting"], parameters=PERIOD_PARAMETERS, responses={200: dict})
    def get(self, request):
        try:
            data = expense_breakdown(period=period_from_request(request))
        except CostingError as exc:
            return error_response(exc)
        return Response(data, status=status.HTTP_200_OK)


class MonthlyReportView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(name="year", type=int, location=OpenApiParameter.QUERY, required=True),
            OpenApiParameter(name="month", type=int, location=OpenApiParameter.QUERY, required=True),
        ],
        responses={200: dict},
    )
    def get(self, request):
        try:
            year = request.query_params.get("year")
            month = request.query_params.get("month")
            if not year or not month:
                raise InvalidPeriodError("year and month are required")
            data = monthly_report(year=year, month=month)
        except CostingError as exc:
            return error_response(exc)
        return Response(data, status=status.HTTP_200_OK)
