from rest_framework import permissions
from friends.models import Friendable
import logging

logger = logging.getLogger('friendable')


class IsActive(permissions.BasePermission):
    """
    Allows access only to active users.
    """
    message = "Your account is inactive."

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_active)


class IsFriendable(permissions.BasePermission):
    """
    Allows access only to users whose model can take part in friendships.
    """
    message = "This account type cannot have friends."

    def has_permission(self, request, view):
        if isinstance(request.user, Friendable):
            return True
        logger.warning(f"Non-friendable user model {request.user.__class__.__name__} used friendship API")
        return False
