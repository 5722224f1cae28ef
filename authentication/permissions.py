"""
Permission classes for role-based access control and API endpoints.

Every class works on the request's resolved session (see
``prakerin.session``) rather than on raw account fields, so a role change
or a removed teacher profile takes effect on the next request.
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from prakerin.policy import can_edit, can_export
from prakerin.session import AdminSession, get_current_session


class HasSession(BasePermission):
    """
    Allows access to any account that resolves to a session.
    """
    message = 'Sesi tidak valid. Silakan login kembali.'

    def has_permission(self, request, view):
        return get_current_session(request) is not None


class PolicyPermission(HasSession):
    """
    Reads are open to every session; writes follow the permission policy
    for the view's ``resource``.
    """
    message = 'Anda tidak memiliki akses untuk mengubah data ini.'

    def has_permission(self, request, view):
        session = get_current_session(request)
        if session is None:
            return False
        if request.method in SAFE_METHODS:
            return True
        return can_edit(session.role, getattr(view, 'resource', None))


class CanExport(HasSession):
    """
    Allows access to sessions whose role may export reports.
    """
    message = 'Anda tidak memiliki akses untuk mengekspor data.'

    def has_permission(self, request, view):
        session = get_current_session(request)
        return session is not None and can_export(session.role)


class IsAdminRole(HasSession):
    """
    Allows access only to administrators.
    """
    message = 'Hanya admin yang dapat melakukan aksi ini.'

    def has_permission(self, request, view):
        return isinstance(get_current_session(request), AdminSession)
