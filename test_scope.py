import datetime

import pytest

from prakerin.models import (
    AssessmentItem, ClassSection, GuidanceLog, Major, Placement, Score, Student, SupervisingTeacher,
    ROLE_TEACHER,
)
from prakerin.scope import (
    filter_by_scope, in_scope, instance_visible, resolve_major_id, scope_queryset,
)
from prakerin.session import (
    AdminSession, KaprogSession, PrincipalSession, TeacherSession, resolve_session,
)

RECORDS = [
    {'id': 1, 'major': {'name': 'RPL'}},
    {'id': 2, 'major': {'name': 'TKJ'}},
    {'id': 3, 'major': {'name': 'RPL'}},
    {'id': 4, 'major': None},
]


def test_admin_scope_is_identity():
    assert filter_by_scope('admin', 'RPL', RECORDS, 'major.name') == RECORDS


def test_principal_reads_everything():
    assert filter_by_scope('kepala_sekolah', None, RECORDS, 'major.name') == RECORDS


def test_kaprog_keeps_only_own_major_in_order():
    result = filter_by_scope('kaprog', 'RPL', RECORDS, 'major.name')
    assert [r['id'] for r in result] == [1, 3]


def test_kaprog_without_major_or_unknown_role_gets_nothing():
    assert filter_by_scope('kaprog', '', RECORDS, 'major.name') == []
    assert filter_by_scope('guest', 'RPL', RECORDS, 'major.name') == []


@pytest.mark.django_db
def test_kaprog_sees_students_of_own_major(budi, siti, kaprog_rpl):
    session = resolve_session(kaprog_rpl)
    assert isinstance(session, KaprogSession)
    names = list(scope_queryset(session, Student.objects.all()).values_list('name', flat=True))
    assert names == ['Budi']


@pytest.mark.django_db
def test_admin_and_principal_see_everything(budi, siti, admin_account, principal):
    for account in (admin_account, principal):
        session = resolve_session(account)
        assert isinstance(session, (AdminSession, PrincipalSession))
        assert scope_queryset(session, Student.objects.all()).count() == 2


@pytest.mark.django_db
def test_unresolvable_major_fails_closed(budi, siti):
    session = KaprogSession(account_id=99, major_name='Tata Boga')
    for model in (Student, ClassSection, Major, Placement):
        assert not scope_queryset(session, model.objects.all()).exists()


@pytest.mark.django_db
def test_missing_session_sees_nothing(budi):
    assert not scope_queryset(None, Student.objects.all()).exists()


@pytest.mark.django_db
def test_scope_preserves_ordering(rpl_class):
    for nis, name in [('10000003', 'Citra'), ('10000001', 'Andi'), ('10000002', 'Bayu')]:
        Student.objects.create(nis=nis, name=name, classroom=rpl_class, major=rpl_class.major)
    session = KaprogSession(account_id=1, major_name='RPL')
    qs = scope_queryset(session, Student.objects.order_by('-nis'))
    assert list(qs.values_list('nis', flat=True)) == ['10000003', '10000002', '10000001']


@pytest.mark.django_db
def test_placements_scoped_through_student(budi, siti, kaprog_tkj):
    Placement.objects.create(student=budi, company_name='PT A')
    Placement.objects.create(student=siti, company_name='PT B')
    session = resolve_session(kaprog_tkj)
    assert list(scope_queryset(session, Placement.objects.all()).values_list('company_name', flat=True)) == ['PT B']


@pytest.mark.django_db
def test_renamed_major_is_forgotten(rpl, budi):
    session = KaprogSession(account_id=1, major_name='RPL')
    assert resolve_major_id('RPL') == rpl.pk
    rpl.name = 'PPLG'
    rpl.save()
    assert resolve_major_id('RPL') is None
    assert not scope_queryset(session, Student.objects.all()).exists()


@pytest.mark.django_db
def test_major_created_later_becomes_visible(db):
    assert resolve_major_id('DKV') is None
    major = Major.objects.create(name='DKV')
    assert resolve_major_id('DKV') == major.pk


@pytest.mark.django_db
def test_teacher_sees_only_assigned_placements(budi, rpl_class, rpl_teacher, django_user_model):
    other = Student.objects.create(nis='10234568', name='Ani', classroom=rpl_class, major=rpl_class.major)
    mine = Placement.objects.create(student=budi, teacher=rpl_teacher, company_name='PT A')
    Placement.objects.create(student=other, company_name='PT B')
    account = django_user_model.objects.create_user(username='andi', password='secret123', role=ROLE_TEACHER)
    rpl_teacher.account = account
    rpl_teacher.save()

    session = resolve_session(account)
    assert isinstance(session, TeacherSession)
    assert session.major_name == 'RPL'
    assert list(scope_queryset(session, Placement.objects.all())) == [mine]
    assert list(scope_queryset(session, Student.objects.all())) == [budi]


@pytest.mark.django_db
def test_teacher_account_without_profile_has_no_session(django_user_model):
    account = django_user_model.objects.create_user(username='orphan', password='secret123', role=ROLE_TEACHER)
    assert resolve_session(account) is None


@pytest.mark.django_db
def test_teacher_sees_global_and_own_major_items(rpl, tkj, rpl_teacher):
    AssessmentItem.objects.create(name='Disiplin', major=None)
    AssessmentItem.objects.create(name='Coding', major=rpl)
    AssessmentItem.objects.create(name='Jaringan', major=tkj)
    session = TeacherSession(account_id=1, teacher_id=rpl_teacher.pk, major_name='RPL')
    names = set(scope_queryset(session, AssessmentItem.objects.all()).values_list('name', flat=True))
    assert names == {'Disiplin', 'Coding'}


@pytest.mark.django_db
def test_in_scope_and_deleted_rows(budi, siti, rpl):
    session = KaprogSession(account_id=1, major_name='RPL')
    assert in_scope(session, budi)
    assert not in_scope(session, siti)

    item = AssessmentItem.objects.create(name='Sikap', major=rpl)
    placement = Placement.objects.create(student=budi)
    score = Score.objects.create(placement=placement, item=item, value=80)
    score_id = score.pk
    score.delete()
    score.pk = score_id
    assert instance_visible(session, score, deleted=True)
    assert not instance_visible(KaprogSession(account_id=1, major_name='TKJ'), score, deleted=True)


@pytest.mark.django_db
def test_deleted_rows_follow_teacher_assignment(budi, rpl, rpl_teacher):
    colleague = SupervisingTeacher.objects.create(name='Bu Rina', major=rpl)
    mine = TeacherSession(account_id=1, teacher_id=rpl_teacher.pk, major_name='RPL')
    theirs = TeacherSession(account_id=2, teacher_id=colleague.pk, major_name='RPL')

    placement = Placement.objects.create(student=budi, teacher=rpl_teacher, company_name='PT A')
    log = GuidanceLog.objects.create(
        placement=placement, teacher=rpl_teacher, date=datetime.date(2025, 2, 3), activity='Kunjungan',
    )
    assert instance_visible(mine, log, deleted=True)
    assert not instance_visible(theirs, log, deleted=True)
    # Reverse relation is resolved while the placement still exists
    assert instance_visible(mine, budi, deleted=True)
    assert not instance_visible(theirs, budi, deleted=True)

    placement_id = placement.pk
    placement.delete()
    placement.pk = placement_id
    assert instance_visible(mine, placement, deleted=True)
    assert not instance_visible(theirs, placement, deleted=True)
    assert instance_visible(mine, rpl_teacher, deleted=True)
    assert not instance_visible(theirs, rpl_teacher, deleted=True)
