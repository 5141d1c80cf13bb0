from dj_rest_auth.views import LogoutView
from dj_rest_auth.views import PasswordChangeView
from dj_rest_auth.views import UserDetailsView
from django.urls import path

from .auth_views import CookieOnlyLoginView

# Login is overridden to set HttpOnly JWT cookies and omit tokens from the JSON
# body. There is no self-service signup or password reset: admins create users.
urlpatterns = [
    path("login/", CookieOnlyLoginView.as_view(), name="rest_login"),
    path("logout/", LogoutView.as_view(), name="rest_logout"),
    path("password/change/", PasswordChangeView.as_view(), name="rest_password_change"),
    path("user/", UserDetailsView.as_view(), name="rest_user_details"),
]
