"""
Management-code scoping for API querysets.

Every driver, vehicle, rider and route row carries a management code. A
request's scope is the set of code ids it may see, or ``None`` for
unrestricted access (superusers).
"""
import logging

from rest_framework.exceptions import PermissionDenied

from accounts.models import DriverSession, ManagementCode

logger = logging.getLogger(__name__)

MANAGEMENT_CODE_HEADER = 'X-Management-Code'


def get_driver_session(request):
    auth = getattr(request, 'auth', None)
    return auth if isinstance(auth, DriverSession) else None


def resolve_scope(request):
    """
    Return the list of ManagementCode ids visible to this request, or None
    when the caller is unrestricted.
    """
    cached = getattr(request, '_management_scope', False)
    if cached is not False:
        return cached

    session = get_driver_session(request)
    requested = request.headers.get(MANAGEMENT_CODE_HEADER)

    if session is not None:
        scope = [session.management_code_id]
    elif getattr(request.user, 'is_superuser', False):
        if requested:
            scope = list(ManagementCode.objects.filter(code=requested).values_list('id', flat=True))
        else:
            scope = None
    else:
        admin = getattr(request.user, 'admin_profile', None)
        if admin is None:
            scope = []
        else:
            codes = ManagementCode.objects.filter(organization_id=admin.organization_id)
            if requested:
                codes = codes.filter(code=requested)
            scope = list(codes.values_list('id', flat=True))

    request._management_scope = scope
    return scope


def scope_queryset(queryset, request, field='management_code'):
    scope = resolve_scope(request)
    if scope is None:
        return queryset
    return queryset.filter(**{f'{field}__in': scope})


def check_in_scope(request, management_code):
    """Refuse writes that would place a row outside the caller's scope."""
    scope = resolve_scope(request)
    if scope is None:
        return
    code_id = getattr(management_code, 'pk', management_code)
    if code_id not in scope:
        logger.warning(f"Refused write to management code {code_id} outside scope {scope}")
        raise PermissionDenied('Management code is outside of your scope.')


def default_code_for(request):
    """The single code a write defaults to when the payload names none."""
    scope = resolve_scope(request)
    if scope and len(scope) == 1:
        return ManagementCode.objects.get(pk=scope[0])
    return None


class ManagementCodeScopedMixin:
    """
    ViewSet mixin that filters the queryset by the request's management codes
    and pins created rows to an in-scope code.
    """
    scope_field = 'management_code'

    def get_queryset(self):
        return scope_queryset(super().get_queryset(), self.request, self.scope_field)

    def perform_create(self, serializer):
        code = serializer.validated_data.get('management_code') or default_code_for(self.request)
        if code is None:
            raise PermissionDenied('A management code is required.')
        check_in_scope(self.request, code)
        serializer.save(management_code=code)

    def perform_update(self, serializer):
        code = serializer.validated_data.get('management_code')
        if code is not None:
            check_in_scope(self.request, code)
        serializer.save()
