"""
Reusable mixins for the API viewsets.

``StandardViewSet`` narrows every queryset through the scope filter and
gates writes with the permission policy, so list, retrieve, update and
delete all see the same records.
"""
import logging

from django.db import transaction
from django.db.models import Q
from rest_framework import status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response
from rest_framework.views import exception_handler

from authentication.permissions import PolicyPermission

from .exceptions import PrakerinError, ScopeError
from .scope import in_scope, scope_queryset
from .session import get_current_session

logger = logging.getLogger(__name__)

OUT_OF_SCOPE = 'Data berada di luar cakupan jurusan Anda.'


def prakerin_exception_handler(exc, context):
    """DRF exception handler that also answers domain errors."""
    if isinstance(exc, ScopeError):
        exc = PermissionDenied(str(exc) or OUT_OF_SCOPE)
    elif isinstance(exc, PrakerinError):
        return Response({'success': False, 'error': str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    return exception_handler(exc, context)


class SearchMixin:
    """Case-insensitive ``?q=`` search over ``search_fields``"""

    search_fields = ()

    def build_search_query(self, search_term):
        q = Q()
        for field in self.search_fields:
            q |= Q(**{f"{field}__icontains": search_term})
        return q

    def filter_search(self, queryset):
        search_term = self.request.query_params.get('q', '').strip()[:100]
        if not search_term or not self.search_fields:
            return queryset
        return queryset.filter(self.build_search_query(search_term))


class ScopedWriteMixin:
    """
    Rejects writes that reference or produce records outside the caller's
    scope. ``scoped_fields`` names the foreign keys to check before saving.
    """

    scoped_fields = ()

    def check_references(self, validated_data):
        session = self.get_session()
        for field in self.scoped_fields:
            target = validated_data.get(field)
            if target is not None and not in_scope(session, target):
                logger.warning("Account %s referenced out-of-scope %s %s",
                               getattr(session, "account_id", None), field, target.pk)
                raise ScopeError(OUT_OF_SCOPE)

    def save_in_scope(self, serializer, **extra):
        self.check_references(serializer.validated_data)
        with transaction.atomic():
            instance = serializer.save(**extra)
            if not in_scope(self.get_session(), instance):
                raise ScopeError(OUT_OF_SCOPE)
        return instance

    def perform_create(self, serializer):
        self.save_in_scope(serializer)

    def perform_update(self, serializer):
        self.save_in_scope(serializer)


class StandardViewSet(SearchMixin, ScopedWriteMixin, viewsets.ModelViewSet):
    """Base ViewSet with scope filtering and policy-gated writes"""

    permission_classes = [PolicyPermission]
    resource = None

    def get_session(self):
        return get_current_session(self.request)

    def get_queryset(self):
        queryset = scope_queryset(self.get_session(), super().get_queryset())
        return self.filter_search(queryset)
