import datetime
import json

import pytest
from rest_framework.test import APIClient

from authentication.credentials import issue_credentials
from prakerin.backup import BACKUP_TABLES, build_backup, dumps_backup, loads_backup, restore_backup
from prakerin.exceptions import BackupError
from prakerin.models import Account, Major, Placement, School, Student, SupervisingTeacher


@pytest.mark.django_db
def test_backup_contains_every_table(budi, admin_account):
    School.objects.create(name='SMK Global Informatika')
    document = build_backup()

    assert set(document['tables']) == {name for name, _ in BACKUP_TABLES}
    assert document['timestamp']
    assert [row['nis'] for row in document['tables']['siswa']] == ['10234567']
    assert document['tables']['users'][0]['username'] == 'admin'


@pytest.mark.django_db
def test_restore_replaces_current_data(budi, rpl, admin_account):
    Placement.objects.create(
        student=budi, company_name='PT Maju', start_date=datetime.date(2025, 1, 6), final_grade='81.50',
    )
    text = dumps_backup(build_backup())

    Student.objects.create(nis='99999999', name='Baru', classroom=budi.classroom, major=rpl)
    Major.objects.create(name='TKJ')
    Placement.objects.all().delete()

    counts = restore_backup(loads_backup(text))

    assert counts['siswa'] == 1
    assert counts['prakerin'] == 1
    assert list(Student.objects.values_list('nis', flat=True)) == ['10234567']
    assert list(Major.objects.values_list('name', flat=True)) == ['RPL']
    placement = Placement.objects.get()
    assert placement.start_date == datetime.date(2025, 1, 6)
    assert str(placement.final_grade) == '81.50'
    assert Account.objects.get(username='admin').check_password('admin123')


@pytest.mark.django_db
def test_restore_rejects_document_without_tables(budi):
    with pytest.raises(BackupError, match='Format file backup tidak valid'):
        restore_backup({'timestamp': 'now'})
    assert Student.objects.count() == 1


def test_loads_rejects_non_json():
    with pytest.raises(BackupError):
        loads_backup('not json')


@pytest.mark.django_db
def test_failed_restore_rolls_back(budi):
    document = json.loads(dumps_backup(build_backup()))
    document['tables']['siswa'] = [{'no_such_column': 1}]

    with pytest.raises(BackupError):
        restore_backup(document)

    assert Student.objects.filter(nis='10234567').exists()


@pytest.mark.django_db
def test_teacher_login_survives_restore(rpl_teacher, budi):
    issue_credentials(rpl_teacher, 'andi', '123456')
    Placement.objects.create(student=budi, company_name='PT Maju', teacher=rpl_teacher)
    text = dumps_backup(build_backup())

    restore_backup(loads_backup(text))

    teacher = SupervisingTeacher.objects.get()
    assert teacher.major.name == 'RPL'
    assert teacher.username == 'andi'
    assert Placement.objects.get().teacher_id == teacher.pk

    response = APIClient().post('/auth/login/', {'username': 'andi', 'password': '123456'}, format='json')
    assert response.status_code == 200
    assert response.json()['user']['role'] == 'guru_pembimbing'
    assert response.json()['user']['major_name'] == 'RPL'
