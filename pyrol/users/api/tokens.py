from rest_framework_simplejwt.serializers import TokenObtainPairSerializer


class RoleTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Token pair whose claims carry the e-mail and role next to the user id.

    dj-rest-auth calls ``get_token`` when it issues the login cookies, so the
    same claims end up in both the cookie and the body-based JWT flow.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["email"] = user.email
        token["role"] = user.role
        return token
