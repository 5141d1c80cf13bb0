from django.http import Http404
from rest_framework.exceptions import NotFound


class NotFoundMessageMixin:
    """Answer a missing detail object with ``{"detail": "<Model> not found"}``."""

    not_found_message = "Not found"

    def get_object(self):
        try:
            return super().get_object()
        except Http404:
            raise NotFound(self.not_found_message) from None
