"""
Student roster CSV: template, parsing with per-row validation, import and
export. The column order is fixed and shared by import and export, so an
exported roster can be imported again.
"""
import csv
import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from django.db import transaction
from django.utils.dateparse import parse_date

from .exceptions import RosterError
from .models import Student

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = [
    'NIS',
    'Nama',
    'Jenis Kelamin',
    'Tempat Lahir',
    'Tanggal Lahir',
    'Alamat',
    'Telepon',
    'Email',
    'Nama Orang Tua',
    'Telepon Orang Tua',
]

# Student attribute for each roster column, in column order
ROSTER_FIELDS = [
    'nis',
    'name',
    'gender',
    'birth_place',
    'birth_date',
    'address',
    'phone',
    'email',
    'parent_name',
    'parent_phone',
]

SAMPLE_ROW = [
    '12345678',
    'John Doe',
    'L',
    'Jakarta',
    '2006-01-15',
    'Jl. Contoh No. 123',
    '081234567890',
    'john@example.com',
    'Jane Doe',
    '081234567891',
]

MIN_NIS_LENGTH = 8


@dataclass
class RosterRow:
    line: int
    nis: str = ''
    name: str = ''
    gender: str = ''
    birth_place: str = ''
    birth_date: Optional[str] = None
    address: str = ''
    phone: str = ''
    email: str = ''
    parent_name: str = ''
    parent_phone: str = ''
    errors: List[str] = field(default_factory=list)

    @property
    def is_valid(self):
        return not self.errors

    def student_fields(self):
        data = {name: getattr(self, name) for name in ROSTER_FIELDS}
        data['birth_date'] = parse_date(self.birth_date) if self.birth_date else None
        return data


def _write_csv(rows):
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def build_roster_template():
    """CSV text with the header and one example student."""
    return _write_csv([ROSTER_COLUMNS, SAMPLE_ROW])


def _validate(row):
    if not row.nis:
        row.errors.append('NIS wajib diisi')
    if not row.name:
        row.errors.append('Nama wajib diisi')
    if row.nis and len(row.nis) < MIN_NIS_LENGTH:
        row.errors.append(f'NIS minimal {MIN_NIS_LENGTH} karakter')
    if row.birth_date:
        try:
            valid_date = parse_date(row.birth_date) is not None
        except ValueError:
            valid_date = False
        if not valid_date:
            row.errors.append('Tanggal lahir tidak valid')
    return row


def parse_roster(text):
    """
    Parse roster CSV text into ``RosterRow`` objects.

    The first non-empty line is the header. Every data line yields a row,
    invalid ones included, so the caller can show what will be skipped.
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    rows = []
    reader = csv.reader(lines[1:])
    for index, values in enumerate(reader, start=2):
        values = [v.strip() for v in values] + [''] * (len(ROSTER_FIELDS) - len(values))
        row = RosterRow(line=index, **dict(zip(ROSTER_FIELDS, values)))
        row.birth_date = row.birth_date or None
        rows.append(_validate(row))
    return rows


def import_roster(rows, classroom, major):
    """
    Create students for the valid rows in ``classroom`` / ``major``.

    Rows with errors and rows whose NIS already exists are skipped.
    Returns ``(created, skipped)``.
    """
    if classroom.major_id != major.pk:
        raise RosterError('Kelas tidak termasuk dalam jurusan yang dipilih')

    valid = [row for row in rows if row.is_valid]
    existing = set(
        Student.objects.filter(nis__in=[row.nis for row in valid]).values_list('nis', flat=True)
    )
    created = 0
    with transaction.atomic():
        for row in valid:
            if row.nis in existing:
                continue
            Student.objects.create(classroom=classroom, major=major, **row.student_fields())
            existing.add(row.nis)
            created += 1

    skipped = len(rows) - created
    logger.info("Roster import into %s: %d created, %d skipped", classroom, created, skipped)
    return created, skipped


def export_roster(students):
    """Roster CSV for ``students`` in the import column order."""
    rows = [ROSTER_COLUMNS]
    for student in students:
        values = []
        for name in ROSTER_FIELDS:
            value = getattr(student, name)
            values.append('' if value is None else str(value))
        rows.append(values)
    return _write_csv(rows)
