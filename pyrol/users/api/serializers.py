from rest_framework import serializers

from pyrol.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)
    employee_id = serializers.SerializerMethodField()

    # Identity and access are managed by admins, never by the user themselves
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    role = serializers.CharField(read_only=True)
    name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "name",
            "role",
            "employee_id",
        ]

    def get_employee_id(self, obj: User) -> int | None:
        employee = getattr(obj, "employee", None)
        return employee.pk if employee is not None else None
