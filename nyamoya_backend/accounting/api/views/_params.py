# accounting/api/views/_params.py

from drf_spectacular.utils import OpenApiParameter

from accounting.services.financials_service import resolve_period


PERIOD_PARAMETERS = [
    OpenApiParameter(
        name="period",
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description="today | this_month | all_time (default all_time).",
    ),
    OpenApiParameter(
        name="start_date",
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description="YYYY-MM-DD. Overrides period when set.",
    ),
    OpenApiParameter(
        name="end_date",
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description="YYYY-MM-DD. Overrides period when set.",
    ),
]


def period_from_request(request):
    params = request.query_params
    return resolve_period(
        preset=params.get("period"),
        start=params.get("start_date"),
        end=params.get("end_date"),
    )
