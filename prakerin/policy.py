"""
Permission policy: which roles may create, update and delete each resource.

Every role may read what its scope lets it see; these functions only answer
the mutation question and take nothing but the role. Instance-level checks
are the scope filter's job.
"""
from .models import ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL, ROLE_TEACHER

MAJOR = 'major'
CLASS_SECTION = 'class_section'
STUDENT = 'student'
ACCOUNT = 'account'
SETTINGS = 'settings'
SCHOOL = 'school'
PLACEMENT = 'placement'
TEACHER = 'teacher'
GUIDANCE = 'guidance'
SCORE = 'score'
ASSESSMENT_ITEM = 'assessment_item'
REPORT = 'report'
DEFENSE_SESSION = 'defense_session'
EXPORT = 'export'

ROLES = (ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL, ROLE_TEACHER)

ADMIN_ONLY = frozenset({MAJOR, CLASS_SECTION, STUDENT, ACCOUNT, SETTINGS, SCHOOL})
PROGRAM_MANAGED = frozenset({
    PLACEMENT, TEACHER, GUIDANCE, SCORE, ASSESSMENT_ITEM, REPORT, DEFENSE_SESSION,
})
TEACHER_MANAGED = frozenset({GUIDANCE, SCORE})

RESOURCES = ADMIN_ONLY | PROGRAM_MANAGED | {EXPORT}


def can_edit(role, resource):
    """True when ``role`` may mutate ``resource``; unknown input is denied."""
    if resource not in RESOURCES or role not in ROLES:
        return False
    if resource == EXPORT:
        return True
    if role == ROLE_ADMIN:
        return True
    if role == ROLE_KAPROG:
        return resource in PROGRAM_MANAGED
    if role == ROLE_TEACHER:
        return resource in TEACHER_MANAGED
    return False


def permission_table():
    """The full role x resource matrix, for display and auditing."""
    return {role: {resource: can_edit(role, resource) for resource in sorted(RESOURCES)} for role in ROLES}


def can_edit_school(role):
    return can_edit(role, SCHOOL)


def can_edit_major(role):
    return can_edit(role, MAJOR)


def can_edit_class_section(role):
    return can_edit(role, CLASS_SECTION)


def can_edit_student(role):
    return can_edit(role, STUDENT)


def can_edit_account(role):
    return can_edit(role, ACCOUNT)


def can_edit_settings(role):
    return can_edit(role, SETTINGS)


def can_edit_placement(role):
    return can_edit(role, PLACEMENT)


def can_edit_teacher(role):
    return can_edit(role, TEACHER)


def can_edit_guidance(role):
    return can_edit(role, GUIDANCE)


def can_edit_score(role):
    return can_edit(role, SCORE)


def can_edit_assessment_item(role):
    return can_edit(role, ASSESSMENT_ITEM)


def can_edit_report(role):
    return can_edit(role, REPORT)


def can_edit_defense_session(role):
    return can_edit(role, DEFENSE_SESSION)


def can_export(role):
    return can_edit(role, EXPORT)


def should_filter_by_major(role):
    """Program heads only ever see their own major."""
    return role == ROLE_KAPROG
