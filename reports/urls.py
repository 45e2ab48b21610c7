from django.urls import path

from reports.views import (
    CompletionView,
    RecordExportView,
    ReportSummaryView,
    RoutePerformanceView,
)

app_name = 'reports'

urlpatterns = [
    path('summary/', ReportSummaryView.as_view(), name='summary'),
    path('completion/', CompletionView.as_view(), name='completion'),
    path('route-performance/', RoutePerformanceView.as_view(), name='route_performance'),
    path('export/', RecordExportView.as_view(), name='export'),
]
