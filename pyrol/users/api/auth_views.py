from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from datetime import timedelta

from dj_rest_auth.views import LoginView
from django.conf import settings
from django.contrib.auth.signals import user_logged_in
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.views import TokenRefreshView


def _set_cookie(
    response: Response,
    name: str,
    value: str,
    max_age: int | None,
) -> None:
    if not value:
        return
    cookie_kwargs = {
        "httponly": True,
        "secure": getattr(settings, "JWT_AUTH_COOKIE_SECURE", not settings.DEBUG),
        "samesite": getattr(settings, "JWT_AUTH_COOKIE_SAMESITE", "Lax"),
        "path": "/",
    }
    if max_age is not None:
        cookie_kwargs["max_age"] = max_age
    response.set_cookie(name, value, **cookie_kwargs)


def set_jwt_cookies(
    response: Response, access: str | None, refresh: str | None
) -> None:
    access_lifetime: timedelta = settings.SIMPLE_JWT["ACCESS_TOKEN_LIFETIME"]
    refresh_lifetime: timedelta = settings.SIMPLE_JWT["REFRESH_TOKEN_LIFETIME"]

    if access:
        _set_cookie(
            response,
            settings.JWT_AUTH_COOKIE,
            access,
            int(access_lifetime.total_seconds()),
        )
    if refresh:
        _set_cookie(
            response,
            settings.JWT_AUTH_REFRESH_COOKIE,
            refresh,
            int(refresh_lifetime.total_seconds()),
        )


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class CookieOnlyLoginView(LoginView):
    """Login that sets HttpOnly JWT cookies and scrubs tokens from JSON body."""

    def post(self, request, *args, **kwargs):  # type: ignore[override]
        response: Response = super().post(request, *args, **kwargs)
        if isinstance(response.data, dict):
            access = response.data.get("access")
            refresh = response.data.get("refresh")
            if access or refresh:
                set_jwt_cookies(response, access, refresh)
                response.data = {"detail": "login successful"}
                # Session login is off, so Django never sends this itself.
                user_logged_in.send(
                    sender=self.user.__class__,
                    request=request,
                    user=self.user,
                )
        return response


@extend_schema_view(post=extend_schema(tags=["Authentication"]))
class CookieOnlyJWTRefreshView(TokenRefreshView):
    """Refresh from the body or the refresh cookie, answering with cookies only."""

    def post(self, request, *args, **kwargs):  # type: ignore[override]
        refresh = request.data.get("refresh") or request.COOKIES.get(
            settings.JWT_AUTH_REFRESH_COOKIE, ""
        )
        serializer = self.get_serializer(data={"refresh": refresh})
        try:
            serializer.is_valid(raise_exception=True)
        except TokenError as exc:
            raise InvalidToken(exc.args[0]) from exc

        response = Response({"detail": "refresh successful"}, status=200)
        set_jwt_cookies(
            response,
            serializer.validated_data.get("access"),
            serializer.validated_data.get("refresh"),
        )
        return response
