from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend


class EmailOrUsernameBackend(ModelBackend):
    """Authenticate with either the e-mail address or the username.

    Login forms post ``email``; dj-rest-auth resolves it to a username before
    calling ``authenticate``, while the admin and the body-based JWT endpoint
    pass whatever the user typed as ``username``.
    """

    def authenticate(self, request, username=None, password=None, **kwargs):
        usermodel = get_user_model()
        login = username or kwargs.get("email")
        if not login or password is None:
            return None
        try:
            user = usermodel.objects.get(email__iexact=login)
        except usermodel.DoesNotExist:
            try:
                user = usermodel.objects.get(username__iexact=login)
            except usermodel.DoesNotExist:
                # Run the hasher anyway to keep timing uniform.
                usermodel().set_password(password)
                return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user

        return None
