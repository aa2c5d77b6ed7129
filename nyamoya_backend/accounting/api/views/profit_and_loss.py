# accounting/api/views/profit_and_loss.py

"""
PROFIT & LOSS (FINANCIAL SUMMARY) API VIEW

GET /api/accounting/profit-and-loss/?period=this_month
GET /api/accounting/profit-and-loss/?start_date=2026-01-01&end_date=2026-01-31

Admin-only. Read-only snapshot (revenue, COGS, expenses, wastage, profit,
margins).
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.views._params import PERIOD_PARAMETERS, period_from_request
from accounting.services.financials_service import compute_financials
from costing.api import error_response
from costing.exceptions import CostingError
from users.permissions import IsAdmin


class ProfitAndLossView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(tags=["accounting"], parameters=PERIOD_PARAMETERS, responses={200: dict})
    def get(self, request):
        try:
            data = compute_financials(period=period_from_request(request))
        except CostingError as exc:
            return error_response(exc)
        return Response(data, status=status.HTTP_200_OK)
