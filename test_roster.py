import datetime

import pytest

from prakerin.exceptions import RosterError
from prakerin.models import Student
from prakerin.roster import (
    ROSTER_COLUMNS, build_roster_template, export_roster, import_roster, parse_roster,
)

HEADER = ','.join(f'"{c}"' for c in ROSTER_COLUMNS)


def test_template_has_header_and_sample():
    lines = build_roster_template().splitlines()
    assert lines[0] == HEADER
    assert lines[1].startswith('"12345678","John Doe"')


def test_parse_flags_invalid_rows_but_keeps_them():
    text = '\n'.join([
        HEADER,
        '"10234567","Budi","L","Bandung","2007-03-01","Jl. Mawar 1","0811","budi@example.com","Pak Budi","0812"',
        '"","Tanpa NIS"',
        '"123","Pendek"',
        '',
        '"10234999","","P"',
        '"10234888","Tanggal Salah","P","Garut","01/02/2007"',
    ])
    rows = parse_roster(text)

    assert [row.errors for row in rows] == [
        [],
        ['NIS wajib diisi'],
        ['NIS minimal 8 karakter'],
        ['Nama wajib diisi'],
        ['Tanggal lahir tidak valid'],
    ]
    assert rows[0].birth_date == '2007-03-01'
    assert rows[0].is_valid


def test_parse_handles_quotes_and_commas():
    rows = parse_roster(HEADER + '\n"10234567","Budi ""Bud"" Santoso","L","","","Jl. A, No. 2"')
    assert rows[0].name == 'Budi "Bud" Santoso'
    assert rows[0].address == 'Jl. A, No. 2'


def test_parse_empty_text():
    assert parse_roster('') == []


@pytest.mark.django_db
def test_import_skips_invalid_and_existing(rpl_class, budi):
    rows = parse_roster('\n'.join([
        HEADER,
        '"10234567","Budi Lagi"',
        '"10235000","Citra"',
        '"1","Salah"',
    ]))

    created, skipped = import_roster(rows, rpl_class, rpl_class.major)

    assert (created, skipped) == (1, 2)
    assert Student.objects.get(nis='10235000').classroom == rpl_class
    assert Student.objects.get(nis='10234567').name == 'Budi'


@pytest.mark.django_db
def test_import_rejects_class_of_other_major(rpl_class, tkj):
    rows = parse_roster(HEADER + '\n"10235000","Citra"')
    with pytest.raises(RosterError):
        import_roster(rows, rpl_class, tkj)


@pytest.mark.django_db
def test_export_then_import_reproduces_students(rpl_class):
    Student.objects.create(
        nis='10234567', name='Budi', classroom=rpl_class, major=rpl_class.major, gender='L',
        birth_place='Bandung', birth_date=datetime.date(2007, 3, 1), address='Jl. Mawar, 1',
        phone='0811', email='budi@example.com', parent_name='Pak Budi', parent_phone='0812',
    )
    Student.objects.create(nis='10234568', name='Ani', classroom=rpl_class, major=rpl_class.major, gender='P')
    fields = ['nis', 'name', 'gender', 'birth_place', 'birth_date', 'address', 'phone', 'email',
              'parent_name', 'parent_phone']
    before = sorted(Student.objects.values_list(*fields))

    text = export_roster(Student.objects.order_by('nis'))
    Student.objects.all().delete()
    created, skipped = import_roster(parse_roster(text), rpl_class, rpl_class.major)

    assert (created, skipped) == (2, 0)
    assert sorted(Student.objects.values_list(*fields)) == before
