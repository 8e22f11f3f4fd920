from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from .permissions import IsActive
import logging

logger = logging.getLogger('friendable')


class LoggingMixin:
    """
    Mixin to add standardized logging to any view.
    """
    def dispatch(self, request, *args, **kwargs):
        logger.info(f"{request.method} request to {request.path} from {request.user}")
        return super().dispatch(request, *args, **kwargs)


class BaseReadOnlyViewSet(LoggingMixin, viewsets.ReadOnlyModelViewSet):
    """
    Base viewset for read-only operations.
    """
    permission_classes = [IsAuthenticated, IsActive]

    def get_queryset(self):
        queryset = super().get_queryset()
        logger.info(f"Fetching {queryset.model.__name__} objects for {self.request.user}")
        return queryset


class BaseViewSet(LoggingMixin, viewsets.ViewSet):
    """
    Base viewset for action-style endpoints that are not tied to one model.
    """
    permission_classes = [IsAuthenticated, IsActive]
