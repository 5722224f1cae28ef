"""
Role registry: resolves an authenticated account to the session variant
that every permission and scope decision is made against.

A session is one of four frozen dataclasses. Only the variants that are
scoped to a major carry ``major_name``, so code that needs the major has
to match on the variant first.
"""
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from .models import (
    Account, SupervisingTeacher, ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL, ROLE_TEACHER,
)


@dataclass(frozen=True)
class AdminSession:
    account_id: int
    role: ClassVar[str] = ROLE_ADMIN


@dataclass(frozen=True)
class KaprogSession:
    account_id: int
    major_name: str
    role: ClassVar[str] = ROLE_KAPROG


@dataclass(frozen=True)
class PrincipalSession:
    account_id: int
    role: ClassVar[str] = ROLE_PRINCIPAL


@dataclass(frozen=True)
class TeacherSession:
    account_id: int
    teacher_id: int
    major_name: Optional[str] = None
    role: ClassVar[str] = ROLE_TEACHER


CurrentSession = Union[AdminSession, KaprogSession, PrincipalSession, TeacherSession]

_CACHE_ATTR = '_prakerin_session'


def resolve_session(account) -> Optional[CurrentSession]:
    """Map an account to its session variant, or None when it grants nothing."""
    if account is None or not getattr(account, 'is_authenticated', False) or not account.is_active:
        return None

    # Accounts created through the Django admin / identity provider are admins
    if account.is_superuser or account.role == ROLE_ADMIN:
        return AdminSession(account_id=account.pk)
    if account.role == ROLE_KAPROG:
        return KaprogSession(account_id=account.pk, major_name=account.major_name or '')
    if account.role == ROLE_PRINCIPAL:
        return PrincipalSession(account_id=account.pk)
    if account.role == ROLE_TEACHER:
        teacher = (
            SupervisingTeacher.objects.select_related('major')
            .filter(account_id=account.pk)
            .first()
        )
        if teacher is None:
            return None
        return TeacherSession(
            account_id=account.pk,
            teacher_id=teacher.pk,
            major_name=teacher.major.name if teacher.major_id else None,
        )
    return None


def resolve_role(account_id) -> Optional[CurrentSession]:
    """Resolve a session from an opaque account identifier."""
    account = Account.objects.filter(pk=account_id).first()
    return resolve_session(account)


def get_current_session(request) -> Optional[CurrentSession]:
    """
    Session for the request's authenticated user.

    The value is memoised on the request per user, so a request that is
    authenticated late (DRF token auth) never sees a stale anonymous result.
    """
    user = getattr(request, 'user', None)
    user_pk = getattr(user, 'pk', None)
    cached = getattr(request, _CACHE_ATTR, None)
    if cached is not None and cached[0] == user_pk:
        return cached[1]

    session = resolve_session(user)
    setattr(request, _CACHE_ATTR, (user_pk, session))
    return session


def refresh_session(request) -> Optional[CurrentSession]:
    """Drop the memoised session and resolve it again from the database."""
    # DRF requests wrap the Django request; either may hold the memo
    for target in (request, getattr(request, '_request', None)):
        if target is not None and _CACHE_ATTR in vars(target):
            delattr(target, _CACHE_ATTR)
    user = getattr(request, 'user', None)
    if user is not None and getattr(user, 'pk', None) is not None:
        user.refresh_from_db()
    return get_current_session(request)


def describe_session(session: Optional[CurrentSession]) -> dict:
    """Plain representation used by API responses."""
    if session is None:
        return {'role': None, 'major_name': None}
    data = {
        'account_id': session.account_id,
        'role': session.role,
        'major_name': getattr(session, 'major_name', None),
    }
    if isinstance(session, TeacherSession):
        data['teacher_id'] = session.teacher_id
    return data
