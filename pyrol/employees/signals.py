from __future__ import annotations

from django.db.models.signals import post_save
from django.dispatch import receiver

from pyrol.employees.models import Employee


@receiver(post_save, sender=Employee)
def sync_user_names_from_employee(sender, instance, created, **kwargs):
    """Keep the linked login's first/last name equal to the employee record.

    The login is what the dashboards and the audit trail show, so a renamed
    employee should not keep showing the old name there.
    """

    user = instance.user
    if user is None:
        return
    if (user.first_name, user.last_name) == (instance.first_name, instance.last_name):
        return
    user.first_name = instance.first_name
    user.last_name = instance.last_name
    user.save(update_fields=["first_name", "last_name", "updated_at"])
