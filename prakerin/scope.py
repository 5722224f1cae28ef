"""
Scope filter: narrows records to what a session may see.

Admins and the principal see every major. A program head sees only records
whose major, directly or through a class, student or placement, is the one
named on their account; a name that matches no major yields nothing.
Supervising teachers see the placements assigned to them and what hangs off
those placements. Filtering never reorders its input.
"""
import logging

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ObjectDoesNotExist
from django.db.models import Manager, Q

from .models import (
    Account, AssessmentItem, ClassSection, DefenseSession, GuidanceLog, Major, Placement,
    ReportDefinition, ReportSubmission, School, Score, SessionExaminer, SessionParticipant,
    Student, SupervisingTeacher, ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL,
)
from .session import AdminSession, KaprogSession, PrincipalSession, TeacherSession

logger = logging.getLogger(__name__)

UNSCOPED_ROLES = (ROLE_ADMIN, ROLE_PRINCIPAL)

# Lookup path from each model to the id of the major it belongs to
MAJOR_PATHS = {
    Major: 'id',
    ClassSection: 'major',
    Student: 'major',
    SupervisingTeacher: 'major',
    AssessmentItem: 'major',
    DefenseSession: 'major',
    ReportDefinition: 'major',
    Placement: 'student__major',
    GuidanceLog: 'placement__student__major',
    Score: 'placement__student__major',
    ReportSubmission: 'student__major',
    SessionParticipant: 'session__major',
    SessionExaminer: 'session__major',
}

# Lookup path from each model to the supervising teacher it is assigned to
TEACHER_PATHS = {
    SupervisingTeacher: 'id',
    Placement: 'teacher',
    GuidanceLog: 'placement__teacher',
    Score: 'placement__teacher',
    Student: 'placements__teacher',
    ReportSubmission: 'student__placements__teacher',
    SessionParticipant: 'student__placements__teacher',
}

# Visible to every session regardless of major
UNSCOPED_MODELS = (School,)


def _cache_key(major_name):
    return f"prakerin:major-id:{major_name}"


def resolve_major_id(major_name):
    """
    Major id for a major name, or None when no major has that name.

    Hits are cached for ``PRAKERIN_SCOPE_CACHE_SECONDS``; misses are not, so a
    major created later becomes visible on the next load.
    """
    if not major_name:
        return None
    key = _cache_key(major_name)
    major_id = cache.get(key)
    if major_id is None:
        major_id = Major.objects.filter(name=major_name).values_list('id', flat=True).first()
        if major_id is not None:
            cache.set(key, major_id, getattr(settings, 'PRAKERIN_SCOPE_CACHE_SECONDS', 300))
    return major_id


def forget_major(major_name):
    """Invalidate the cached id of a renamed or deleted major."""
    if major_name:
        cache.delete(_cache_key(major_name))


def _lookup(record, path):
    """Follow a dotted path through dicts and attributes, like ``siswa.jurusan.nama``."""
    value = record
    for part in path.split('.'):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def filter_by_scope(role, major_name, records, major_key_path):
    """
    In-memory scope filter over already loaded records.

    ``major_key_path`` names the major of each record, e.g. ``major.name``.
    Unknown roles and program heads without a major get an empty list.
    """
    if role in UNSCOPED_ROLES:
        return list(records)
    if role != ROLE_KAPROG or not major_name:
        return []
    return [record for record in records if _lookup(record, major_key_path) == major_name]


def _filter_by_major(queryset, major_id):
    path = MAJOR_PATHS.get(queryset.model)
    if path is None:
        return queryset.none()
    if path == 'id':
        return queryset.filter(pk=major_id)
    return queryset.filter(**{f"{path}_id": major_id})


def _filter_by_teacher(queryset, session):
    model = queryset.model
    path = TEACHER_PATHS.get(model)
    if path is not None:
        if path == 'id':
            return queryset.filter(pk=session.teacher_id)
        qs = queryset.filter(**{f"{path}_id": session.teacher_id})
        return qs.distinct() if '__' in path else qs

    major_id = resolve_major_id(session.major_name)
    if model is AssessmentItem:
        if major_id is None:
            return queryset.filter(major__isnull=True)
        return queryset.filter(Q(major__isnull=True) | Q(major_id=major_id))
    if major_id is None:
        return queryset.none()
    return _filter_by_major(queryset, major_id)


def scope_queryset(session, queryset):
    """Queryset restricted to ``session``'s scope, keeping its ordering."""
    model = queryset.model
    if session is None:
        return queryset.none()
    if isinstance(session, (AdminSession, PrincipalSession)):
        return queryset
    if model in UNSCOPED_MODELS:
        return queryset
    if model is Account:
        return queryset.filter(pk=session.account_id)
    if isinstance(session, TeacherSession):
        return _filter_by_teacher(queryset, session)
    if isinstance(session, KaprogSession):
        major_id = resolve_major_id(session.major_name)
        if major_id is None:
            logger.warning("Major %r of account %s does not exist; scope is empty",
                           session.major_name, session.account_id)
            return queryset.none()
        return _filter_by_major(queryset, major_id)
    return queryset.none()


def in_scope(session, instance):
    """True when ``instance`` is visible to ``session``."""
    if instance is None or instance.pk is None:
        return False
    model = type(instance)
    return scope_queryset(session, model.objects.filter(pk=instance.pk)).exists()


def major_id_of(instance):
    """
    Major id an instance belongs to, computed from loaded attributes so it
    also works for rows that have just been deleted. None when unknown.
    """
    path = MAJOR_PATHS.get(type(instance))
    if path is None:
        return None
    if path == 'id':
        return instance.pk
    parts = path.split('__')
    target = instance
    try:
        for part in parts[:-1]:
            target = getattr(target, part)
            if target is None:
                return None
    except ObjectDoesNotExist:
        return None
    return getattr(target, f"{parts[-1]}_id", None)


def assigned_to_teacher(instance, teacher_id):
    """
    True when ``instance`` is assigned to the supervising teacher
    ``teacher_id`` along its ``TEACHER_PATHS`` entry. Works from loaded
    attributes for rows that have just been deleted; reverse relations
    (a student's placements) are asked of the database.
    """
    path = TEACHER_PATHS.get(type(instance))
    if path is None:
        return False
    if path == 'id':
        return instance.pk == teacher_id
    parts = path.split('__')
    target = instance
    try:
        for index, part in enumerate(parts[:-1]):
            target = getattr(target, part)
            if target is None:
                return False
            if isinstance(target, Manager):
                rest = '__'.join(parts[index + 1:])
                return target.filter(**{f"{rest}_id": teacher_id}).exists()
    except ObjectDoesNotExist:
        return False
    return getattr(target, f"{parts[-1]}_id", None) == teacher_id


def instance_visible(session, instance, deleted=False):
    """Scope check for change notifications, including deleted rows."""
    if session is None:
        return False
    if isinstance(session, (AdminSession, PrincipalSession)):
        return True
    if type(instance) in UNSCOPED_MODELS:
        return True
    if not deleted:
        return in_scope(session, instance)
    if isinstance(session, TeacherSession):
        if type(instance) in TEACHER_PATHS:
            return assigned_to_teacher(instance, session.teacher_id)
        # Global assessment items are visible to every teacher
        if isinstance(instance, AssessmentItem) and instance.major_id is None:
            return True
    major_name = getattr(session, 'major_name', None)
    major_id = resolve_major_id(major_name)
    return major_id is not None and major_id_of(instance) == major_id
