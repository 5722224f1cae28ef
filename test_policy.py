import pytest

from prakerin import policy
from prakerin.models import ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL, ROLE_TEACHER

ADMIN_ONLY = ['major', 'class_section', 'student', 'account', 'settings', 'school']
PROGRAM = ['placement', 'teacher', 'guidance', 'score', 'assessment_item', 'report', 'defense_session']

EXPECTED = {}
for resource in ADMIN_ONLY:
    EXPECTED[resource] = {ROLE_ADMIN: True, ROLE_KAPROG: False, ROLE_PRINCIPAL: False}
for resource in PROGRAM:
    EXPECTED[resource] = {ROLE_ADMIN: True, ROLE_KAPROG: True, ROLE_PRINCIPAL: False}
EXPECTED['export'] = {ROLE_ADMIN: True, ROLE_KAPROG: True, ROLE_PRINCIPAL: True}


@pytest.mark.parametrize('resource', sorted(EXPECTED))
@pytest.mark.parametrize('role', [ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL])
def test_can_edit_matches_table(role, resource):
    assert policy.can_edit(role, resource) is EXPECTED[resource][role]


def test_examples_from_table():
    assert policy.can_edit_student(ROLE_PRINCIPAL) is False
    assert policy.can_edit_score(ROLE_KAPROG) is True
    assert policy.can_export(ROLE_PRINCIPAL) is True


def test_supervising_teacher_edits_guidance_and_scores_only():
    allowed = {resource for resource in policy.RESOURCES if policy.can_edit(ROLE_TEACHER, resource)}
    assert allowed == {'guidance', 'score', 'export'}


def test_unknown_role_or_resource_is_denied():
    assert policy.can_edit('guest', 'student') is False
    assert policy.can_edit(ROLE_ADMIN, 'nuclear_codes') is False
    assert policy.can_edit(None, 'export') is False


def test_permission_table_covers_every_role():
    table = policy.permission_table()
    assert set(table) == {ROLE_ADMIN, ROLE_KAPROG, ROLE_PRINCIPAL, ROLE_TEACHER}
    assert table[ROLE_KAPROG]['placement'] is True
    assert table[ROLE_KAPROG]['major'] is False


def test_should_filter_by_major():
    assert policy.should_filter_by_major(ROLE_KAPROG)
    assert not policy.should_filter_by_major(ROLE_ADMIN)
    assert not policy.should_filter_by_major(ROLE_PRINCIPAL)
