from django.utils.translation import gettext_lazy as _
from rest_framework import authentication, exceptions

from accounts.models import DriverSession


class DriverSessionAuthentication(authentication.BaseAuthentication):
    """
    Authenticates driver requests carrying ``Authorization: Driver <token>``.

    ``request.user`` is the Driver and ``request.auth`` the DriverSession.
    """
    keyword = 'Driver'

    def authenticate(self, request):
        auth = authentication.get_authorization_header(request).split()
        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None

        if len(auth) != 2:
            raise exceptions.AuthenticationFailed(_('Invalid driver session header.'))

        try:
            token = auth[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed(_('Invalid driver session token.'))

        return self.authenticate_credentials(token)

    def authenticate_credentials(self, token):
        try:
            session = DriverSession.objects.select_related(
                'driver', 'vehicle', 'route', 'management_code'
            ).get(token=token)
        except DriverSession.DoesNotExist:
            raise exceptions.AuthenticationFailed(_('Invalid driver session token.'))

        if not session.is_active:
            raise exceptions.AuthenticationFailed(_('Driver session has ended.'))
        if not session.driver.is_active:
            raise exceptions.AuthenticationFailed(_('Driver is inactive.'))
        if not session.management_code.is_active:
            raise exceptions.AuthenticationFailed(_('Management code is inactive.'))

        return session.driver, session

    def authenticate_header(self, request):
        return self.keyword
