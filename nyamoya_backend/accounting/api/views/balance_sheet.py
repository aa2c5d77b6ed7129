# accounting/api/views/balance_sheet.py

"""
INVENTORY VALUATION (BALANCE SHEET) API VIEW

GET /api/accounting/balance-sheet/

Stock on hand at weighted-average cost, raw materials and finished goods.
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.services.valuation_service import inventory_valuation
from users.permissions import IsAdmin


class BalanceSheetView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    @extend_schema(tags=["accounting"], responses={200: dict})
    def get(self, request):
        return Response(inventory_valuation(), status=status.HTTP_200_OK)
