from datetime import date

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from hms_backend.core import access
from hms_backend.core.exceptions import InvalidInput
from hms_backend.core.permissions import WorkflowPermission
from hms_backend.reports.services import daily_summary


class DailySummaryView(APIView):
    """GET /api/reports/daily-summary/?date=YYYY-MM-DD (default: today)."""

    permission_classes = [WorkflowPermission]
    workflows = {'GET': access.VIEW_REPORTS}

    def get(self, request, *args, **kwargs):
        raw = request.query_params.get('date')
        day = None
        if raw:
            try:
                day = date.fromisoformat(raw)
            except ValueError:
                e = InvalidInput('Date must be in format YYYY-MM-DD.', fields={'date': [raw]})
                return Response(e.to_dict(), status=e.status_code)

        return Response(daily_summary(day), status=status.HTTP_200_OK)
