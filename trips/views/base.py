import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError, PermissionDenied
from rest_framework.response import Response

from accounts.permissions import IsAdminOrDriver
from accounts.scoping import check_in_scope, get_driver_session, scope_queryset
from fleet.models import Driver, Vehicle
from routes.models import Route
from trips.models import CANCELLED
from trips.serializers import FieldUpdateSerializer, ReconcileSerializer
from trips.services.reconciler import reconcile_for_session, recreate_record
from trips.services.timeutils import current_clock_time, parse_iso_date
from trips.services.updater import (
    complete_if_filled,
    complete_record,
    start_record,
    update_detail_field,
    update_record_field,
)

logger = logging.getLogger(__name__)

DUPLICATE_RECORD = 'DUPLICATE_RECORD'


class TripRecordViewSet(viewsets.ModelViewSet):
    """
    Shared behaviour of the delivery and transportation record endpoints.
    """
    permission_classes = [IsAdminOrDriver]
    ordering_fields = ['created_at', 'updated_at', 'status', 'start_time']
    extra_serializer_class = None

    @property
    def record_model(self):
        return self.queryset.model

    def get_queryset(self):
        queryset = scope_queryset(super().get_queryset(), self.request, 'driver__management_code')
        session = get_driver_session(self.request)
        if session is not None:
            queryset = queryset.filter(driver=session.driver)

        date_field = self.record_model.DATE_FIELD
        params = self.request.query_params
        try:
            if date_from := parse_iso_date(params.get('date_from')):
                queryset = queryset.filter(**{f'{date_field}__gte': date_from})
            if date_to := parse_iso_date(params.get('date_to')):
                queryset = queryset.filter(**{f'{date_field}__lte': date_to})
        except ValidationError as e:
            raise ParseError({'error': e.message})
        if params.get('active') == 'true':
            queryset = queryset.exclude(status=CANCELLED)
        return queryset

    # --- helpers -------------------------------------------------------

    def record_response(self, record, status_code=status.HTTP_200_OK, **extra):
        data = self.get_serializer(record).data
        if extra:
            data = {'record': data, **extra}
        return Response(data, status=status_code)

    def handle_transition(self, record, transition_func, **kwargs):
        """
        Wrapper for status transitions; ValidationError becomes a 400.
        """
        try:
            transition_func(record, **kwargs)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        record.refresh_from_db()
        return self.record_response(record)

    def find_active_duplicate(self, data):
        key = {field: data.get(field) for field in self.record_model.NATURAL_KEY}
        return self.record_model.objects.exclude(status=CANCELLED).filter(**key).first()

    def duplicate_response(self, existing):
        logger.warning(f"Duplicate {self.record_model.RECORD_TYPE} record refused; existing id {existing.id}")
        return Response({
            'error': 'An active record already exists for this driver, vehicle and date.',
            'code': DUPLICATE_RECORD,
            'existing_record': self.get_serializer(existing).data,
        }, status=status.HTTP_409_CONFLICT)

    def check_related_in_scope(self, data):
        for field in ('driver', 'vehicle', 'route'):
            obj = data.get(field)
            if obj is not None:
                check_in_scope(self.request, obj.management_code_id)

    def populate_details(self, record, extra):
        """Create the detail rows of a new record from the validated ``extra_serializer_class`` data."""
        raise NotImplementedError

    def reconcile(self, request, data):
        """Reconcile a record for explicit ids; subclasses map to their service."""
        raise NotImplementedError

    def _scoped_get(self, model, pk, label):
        if pk is None:
            raise ValidationError(f'{label} is required.')
        obj = scope_queryset(model.objects.filter(is_active=True), self.request).filter(pk=pk).first()
        if obj is None:
            raise ValidationError(f'{label} not found.')
        return obj

    # --- CRUD ----------------------------------------------------------

    def create(self, request, *args, **kwargs):
        extra = {}
        if self.extra_serializer_class is not None:
            extra_serializer = self.extra_serializer_class(data=request.data)
            if not extra_serializer.is_valid():
                return Response(extra_serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            extra = extra_serializer.validated_data

        data = request.data.copy()
        session = get_driver_session(request)
        if session is not None:
            data['driver'] = session.driver.id
        serializer = self.get_serializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        self.check_related_in_scope(serializer.validated_data)
        existing = self.find_active_duplicate(serializer.validated_data)
        if existing is not None:
            return self.duplicate_response(existing)

        try:
            with transaction.atomic():
                record = serializer.save()
                self.populate_details(record, extra)
        except IntegrityError:
            existing = self.find_active_duplicate(serializer.validated_data)
            if existing is None:
                raise
            return self.duplicate_response(existing)

        logger.info(f"Created {record.RECORD_TYPE} record {record.id}")
        return self.record_response(record, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        record = self.get_object()
        if record.status == CANCELLED:
            return Response({'error': 'Cancelled records cannot be updated.'}, status=status.HTTP_400_BAD_REQUEST)

        serializer = self.get_serializer(record, data=request.data, partial=partial)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        if get_driver_session(request) is not None:
            serializer.validated_data.pop('driver', None)
        self.check_related_in_scope(serializer.validated_data)

        key = {f: serializer.validated_data.get(f, getattr(record, f)) for f in self.record_model.NATURAL_KEY}
        existing = self.find_active_duplicate(key)
        if existing is not None and existing.pk != record.pk:
            return self.duplicate_response(existing)

        with transaction.atomic():
            serializer.save()
            complete_if_filled(record)
        record.refresh_from_db()
        return self.record_response(record)

    def destroy(self, request, *args, **kwargs):
        """Soft delete: the record is cancelled, never removed."""
        record = self.get_object()
        if record.status != CANCELLED:
            try:
                record.mark_cancelled()
            except ValidationError as e:
                return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
            logger.info(f"{record.RECORD_TYPE} record {record.id} cancelled via DELETE")
        return Response(status=status.HTTP_204_NO_CONTENT)

    # --- actions -------------------------------------------------------

    @action(detail=False, methods=['get'])
    def today(self, request):
        """
        Driver sessions get today's record, created on first request.
        Administrators get the list of today's records in scope.
        """
        session = get_driver_session(request)
        if session is None:
            records = self.filter_queryset(self.get_queryset()).filter(
                **{self.record_model.DATE_FIELD: timezone.localdate()}
            )
            return Response(self.get_serializer(records, many=True).data)

        try:
            record, created = reconcile_for_session(session, self.record_model.RECORD_TYPE)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return self.record_response(record, created=created)

    @action(detail=False, methods=['post'], url_path='reconcile')
    def reconcile_record(self, request):
        """
        Find or create the active record for a key.
        POST /api/trips/<records>/reconcile/
        {
            "driver": 1, "vehicle": 2, "route": 3, "riders": [4, 5], "date": "2026-10-19"
        }
        Driver sessions may omit everything but the date.
        """
        serializer = ReconcileSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data

        session = get_driver_session(request)
        try:
            if session is not None:
                record, created = reconcile_for_session(session, self.record_model.RECORD_TYPE, data.get('date'))
            else:
                data['driver'] = self._scoped_get(Driver, data.get('driver'), 'Driver')
                data['vehicle'] = self._scoped_get(Vehicle, data.get('vehicle'), 'Vehicle')
                if data.get('route'):
                    data['route'] = self._scoped_get(Route, data['route'], 'Route')
                record, created = self.reconcile(request, data)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)

        status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
        return self.record_response(record, status_code, created=created)

    @action(detail=True, methods=['post'])
    def update_field(self, request, pk=None):
        """
        Write one clock time or odometer reading.
        POST /api/trips/<records>/{id}/update_field/
        {
            "field": "end_odometer",
            "value": 12345
        }
        """
        record = self.get_object()
        serializer = FieldUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = update_record_field(record, serializer.validated_data['field'], serializer.validated_data['value'])
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        record.refresh_from_db()
        return self.record_response(record, warnings=result.warnings, completed=result.completed)

    @action(detail=True, methods=['post'])
    def start(self, request, pk=None):
        record = self.get_object()
        return self.handle_transition(
            record, start_record,
            start_time=request.data.get('start_time'),
            start_odometer=request.data.get('start_odometer'),
        )

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        record = self.get_object()
        return self.handle_transition(
            record, complete_record,
            end_time=request.data.get('end_time'),
            end_odometer=request.data.get('end_odometer'),
        )

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        record = self.get_object()
        return self.handle_transition(record, lambda r: r.mark_cancelled())

    @action(detail=True, methods=['post'])
    def recreate(self, request, pk=None):
        """
        Cancel this record and start a fresh one for the same key.
        """
        record = self.get_object()
        try:
            new_record = recreate_record(record)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        return self.record_response(new_record, status.HTTP_201_CREATED)


class TripDetailViewSet(mixins.ListModelMixin,
                        mixins.RetrieveModelMixin,
                        mixins.UpdateModelMixin,
                        viewsets.GenericViewSet):
    """
    Shared behaviour of the detail endpoints. Details are created by the
    reconciler, so only reads and updates are exposed.
    """
    permission_classes = [IsAdminOrDriver]
    ordering_fields = ['sequence', 'arrival_time']

    def get_queryset(self):
        queryset = scope_queryset(super().get_queryset(), self.request, 'record__driver__management_code')
        session = get_driver_session(self.request)
        if session is not None:
            queryset = queryset.filter(record__driver=session.driver)
        return queryset

    def perform_update(self, serializer):
        record = serializer.instance.record
        if record.status == CANCELLED:
            raise PermissionDenied('Cancelled records cannot be updated.')
        destination = serializer.validated_data.get('destination')
        if destination is not None:
            check_in_scope(self.request, destination.route.management_code_id)
        with transaction.atomic():
            serializer.save()
            complete_if_filled(record)

    def _write(self, detail, field, value):
        try:
            result = update_detail_field(detail, field, value)
        except ValidationError as e:
            return Response({'error': e.message}, status=status.HTTP_400_BAD_REQUEST)
        detail.refresh_from_db()
        return Response({
            'detail': self.get_serializer(detail).data,
            'record_status': result.record.status,
            'warnings': result.warnings,
            'completed': result.completed,
        })

    @action(detail=True, methods=['post'])
    def update_field(self, request, pk=None):
        detail = self.get_object()
        serializer = FieldUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return self._write(detail, serializer.validated_data['field'], serializer.validated_data['value'])

    @action(detail=True, methods=['post'])
    def arrive(self, request, pk=None):
        """Record arrival, at the given time or now."""
        detail = self.get_object()
        return self._write(detail, 'arrival_time', request.data.get('time') or current_clock_time())

    @action(detail=True, methods=['post'])
    def depart(self, request, pk=None):
        """Record departure, at the given time or now."""
        detail = self.get_object()
        return self._write(detail, 'departure_time', request.data.get('time') or current_clock_time())
