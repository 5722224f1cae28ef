"""
Middleware that attaches the resolved role session to each request.
"""
import logging

from django.utils.deprecation import MiddlewareMixin

from prakerin.session import get_current_session

logger = logging.getLogger(__name__)


class CurrentSessionMiddleware(MiddlewareMixin):
    """
    Resolves the session of cookie-authenticated users up front.

    Token-authenticated API requests are resolved later by the permission
    classes, once DRF has authenticated them.
    """

    def process_request(self, request):
        user = getattr(request, 'user', None)
        if user is None or not user.is_authenticated:
            request.prakerin_session = None
            return
        request.prakerin_session = get_current_session(request)
        if request.prakerin_session is None:
            logger.warning("Account %s is authenticated but has no usable role", user.pk)
