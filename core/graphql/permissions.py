from strawberry.permission import BasePermission
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken


class IsAuthenticated(BasePermission):
    """Accepts a Django session or the same Bearer JWT the REST API takes."""
    message = "Authentication credentials were not provided or are invalid."

    def has_permission(self, source, info, **kwargs) -> bool:
        request = info.context.request
        if request.user.is_authenticated:
            return True
        try:
            return JWTAuthentication().authenticate(request) is not None
        except (InvalidToken, AuthenticationFailed):
            return False
