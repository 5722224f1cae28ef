import pytest

from prakerin import realtime
from prakerin.models import AssessmentItem, Placement, Student, SupervisingTeacher
from prakerin.session import AdminSession, KaprogSession, TeacherSession


@pytest.mark.django_db
def test_subscriber_receives_insert_update_delete(budi, django_capture_on_commit_callbacks):
    events = []
    realtime.subscribe('prakerin', events.append)

    with django_capture_on_commit_callbacks(execute=True):
        placement = Placement.objects.create(student=budi, company_name='PT A')
        placement.company_name = 'PT B'
        placement.save()
        placement_id = placement.pk
        placement.delete()

    assert [e.event_type for e in events] == ['INSERT', 'UPDATE', 'DELETE']
    assert all(e.table == 'prakerin' for e in events)
    assert events[1].row['company_name'] == 'PT B'
    assert events[2].row['id'] == placement_id


@pytest.mark.django_db
def test_events_wait_for_commit(budi, django_capture_on_commit_callbacks):
    events = []
    realtime.subscribe('prakerin', events.append)

    with django_capture_on_commit_callbacks(execute=True):
        Placement.objects.create(student=budi)
        assert events == []

    assert len(events) == 1


@pytest.mark.django_db
def test_other_tables_are_not_delivered(budi, django_capture_on_commit_callbacks):
    events = []
    realtime.subscribe('jurusan', events.append)
    with django_capture_on_commit_callbacks(execute=True):
        Placement.objects.create(student=budi)
    assert events == []


@pytest.mark.django_db
def test_unsubscribe_stops_delivery(rpl_class, django_capture_on_commit_callbacks):
    events = []
    unsubscribe = realtime.subscribe('siswa', events.append)
    with django_capture_on_commit_callbacks(execute=True):
        Student.objects.create(nis='10000001', name='Andi', classroom=rpl_class, major=rpl_class.major)
    unsubscribe()
    with django_capture_on_commit_callbacks(execute=True):
        Student.objects.create(nis='10000002', name='Bayu', classroom=rpl_class, major=rpl_class.major)
    assert len(events) == 1


@pytest.mark.django_db
def test_scoped_subscribers_only_see_their_major(rpl_class, tkj_class, django_capture_on_commit_callbacks):
    rpl_events, tkj_events, admin_events = [], [], []
    realtime.subscribe('siswa', rpl_events.append, session=KaprogSession(account_id=1, major_name='RPL'))
    realtime.subscribe('siswa', tkj_events.append, session=KaprogSession(account_id=2, major_name='TKJ'))
    realtime.subscribe('siswa', admin_events.append, session=AdminSession(account_id=3))

    with django_capture_on_commit_callbacks(execute=True):
        student = Student.objects.create(nis='10000001', name='Andi', classroom=rpl_class, major=rpl_class.major)
        student.delete()

    assert [e.event_type for e in rpl_events] == ['INSERT', 'DELETE']
    assert tkj_events == []
    assert len(admin_events) == 2


@pytest.mark.django_db
def test_teacher_sees_deletes_of_own_placements_only(budi, rpl, rpl_teacher, django_capture_on_commit_callbacks):
    colleague = SupervisingTeacher.objects.create(name='Bu Rina', major=rpl)
    mine, theirs = [], []
    realtime.subscribe('prakerin', mine.append,
                       session=TeacherSession(account_id=1, teacher_id=rpl_teacher.pk, major_name='RPL'))
    realtime.subscribe('prakerin', theirs.append,
                       session=TeacherSession(account_id=2, teacher_id=colleague.pk, major_name='RPL'))

    placement = Placement.objects.create(student=budi, teacher=rpl_teacher)
    with django_capture_on_commit_callbacks(execute=True):
        placement.delete()

    assert [e.event_type for e in mine] == ['DELETE']
    assert theirs == []


@pytest.mark.django_db
def test_rejected_write_publishes_nothing(kaprog_rpl, rpl, api_client_for, django_capture_on_commit_callbacks):
    events = []
    realtime.subscribe('item_penilaian', events.append)

    with django_capture_on_commit_callbacks(execute=True):
        response = api_client_for(kaprog_rpl).post(
            '/api/assessment-items/', {'name': 'Sikap', 'category': 'industri', 'weight': 1}, format='json',
        )

    assert response.status_code == 403
    assert not AssessmentItem.objects.exists()
    assert events == []


@pytest.mark.django_db
def test_failing_subscriber_does_not_block_others(budi, caplog, django_capture_on_commit_callbacks):
    events = []

    def broken(event):
        raise RuntimeError('boom')

    realtime.subscribe('prakerin', broken)
    realtime.subscribe('prakerin', events.append)
    with django_capture_on_commit_callbacks(execute=True):
        Placement.objects.create(student=budi)

    assert len(events) == 1
    assert 'Change subscriber for prakerin failed' in caplog.text
