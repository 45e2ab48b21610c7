"""
API views for aggregated reports and CSV export.
"""
import logging

from django.core.exceptions import ValidationError
from django.http import HttpResponse
from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdmin
from accounts.scoping import scope_queryset
from reports.services.aggregation import (
    DEFAULT_RECORD_TYPE,
    DIMENSIONS,
    PERIODS,
    build_report,
    completion_by,
    record_model_for,
    records_between,
    resolve_period,
    route_performance,
)
from reports.services.csv_export import export_filename, render_records_csv
from trips.models import RECORD_MODELS

logger = logging.getLogger(__name__)

record_type_param = openapi.Parameter(
    'record_type', openapi.IN_QUERY, type=openapi.TYPE_STRING,
    enum=list(RECORD_MODELS), default=DEFAULT_RECORD_TYPE,
    description="Which records to aggregate."
)
period_params = [
    openapi.Parameter('period', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=list(PERIODS),
                      description="current_month (default), last_month or custom."),
    openapi.Parameter('start', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE,
                      description="Start date for a custom period."),
    openapi.Parameter('end', openapi.IN_QUERY, type=openapi.TYPE_STRING, format=openapi.FORMAT_DATE,
                      description="End date for a custom period."),
]


class ScopedReportView(APIView):
    permission_classes = [IsAdmin]

    def scoped_records(self, request):
        model = record_model_for(request.query_params.get('record_type'))
        queryset = scope_queryset(model.objects.all(), request, 'driver__management_code')
        return model, queryset

    def period(self, request):
        params = request.query_params
        return resolve_period(params.get('period'), params.get('start'), params.get('end'))


class ReportSummaryView(ScopedReportView):
    """Totals and completion rates by driver, vehicle, route and month."""

    @swagger_auto_schema(
        manual_parameters=[record_type_param] + period_params,
        responses={200: "Report with summary and per-group completion rates", 400: "Invalid parameters"},
        tags=['Reports']
    )
    def get(self, request, format=None):
        try:
            model, queryset = self.scoped_records(request)
            start_date, end_date = self.period(request)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response(build_report(model, start_date, end_date, queryset))


class CompletionView(ScopedReportView):
    """Completion rates for a single grouping."""

    @swagger_auto_schema(
        manual_parameters=[
            record_type_param,
            openapi.Parameter('dimension', openapi.IN_QUERY, type=openapi.TYPE_STRING, enum=list(DIMENSIONS),
                              required=True, description="Grouping of the records."),
        ] + period_params,
        tags=['Reports']
    )
    def get(self, request, format=None):
        dimension = request.query_params.get('dimension')
        if dimension not in DIMENSIONS:
            return Response(
                {'error': f'dimension must be one of {list(DIMENSIONS)}'},
                status=status.HTTP_400_BAD_REQUEST
            )
        try:
            model, queryset = self.scoped_records(request)
            start_date, end_date = self.period(request)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        records = records_between(model, start_date, end_date, queryset).select_related('driver', 'vehicle', 'route')
        return Response({
            'record_type': model.RECORD_TYPE,
            'dimension': dimension,
            'start_date': start_date,
            'end_date': end_date,
            'rows': completion_by(records, dimension),
        })


class RoutePerformanceView(ScopedReportView):
    """Today's mean route duration against this month's."""

    @swagger_auto_schema(manual_parameters=[record_type_param], tags=['Reports'])
    def get(self, request, format=None):
        try:
            model, queryset = self.scoped_records(request)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return Response({
            'record_type': model.RECORD_TYPE,
            'date': timezone.localdate(),
            'routes': route_performance(model, queryset),
        })


class RecordExportView(ScopedReportView):
    """Records of one type in a period as a CSV download."""

    @swagger_auto_schema(
        manual_parameters=[
            record_type_param,
            openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              description="Only export records with this status."),
        ] + period_params,
        responses={200: "CSV file", 400: "Invalid parameters"},
        tags=['Reports']
    )
    def get(self, request, format=None):
        try:
            model, queryset = self.scoped_records(request)
            start_date, end_date = self.period(request)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        records = records_between(model, start_date, end_date, queryset).select_related(
            'driver', 'vehicle', 'route'
        ).order_by(model.DATE_FIELD, 'id')
        if record_status := request.query_params.get('status'):
            records = records.filter(status=record_status)

        filename = export_filename(model.RECORD_TYPE)
        response = HttpResponse(render_records_csv(records, model.RECORD_TYPE), content_type='text/csv; charset=utf-8')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        logger.info(f"Exported {model.RECORD_TYPE} records {start_date}..{end_date} as {filename}")
        return response


@swagger_auto_schema(
    method='get',
    operation_id="health_check_get",
    operation_description="Returns the operational status of the service.",
    responses={200: openapi.Response(description="Service is healthy.", examples={"application/json": {"status": "healthy"}})},
    tags=['Health Check']
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    return Response({"status": "healthy"}, status=status.HTTP_200_OK)
