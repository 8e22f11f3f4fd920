import time
import logging
import json
from django.conf import settings
from friends.refs import EntityRef

logger = logging.getLogger('friendable')


class RequestLogMiddleware:
    """
    Logs one JSON line per request.

    Friendship actions also carry the target entity the view resolved, so a
    request line shows who acted on whom.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)

        log_data = {
            'method': request.method,
            'path': request.path,
            'actor': self.actor_key(request),
            'status_code': response.status_code,
            'duration_ms': round((time.monotonic() - started) * 1000, 2),
        }

        target = getattr(request, 'friendship_target', None)
        if target is not None:
            log_data['target_type'] = target.label
            log_data['target_id'] = target.object_id

        if settings.DEBUG:
            log_data['query_params'] = dict(request.GET.items())

        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, f"Request: {json.dumps(log_data)}")

        return response

    @staticmethod
    def actor_key(request):
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            return None
        return EntityRef.of(user).key
