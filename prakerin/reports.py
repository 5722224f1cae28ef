"""
Rows and columns of the placement report ("Laporan Prakerin").
"""
from decimal import Decimal

from django.conf import settings

from .models import School
from .session import KaprogSession, TeacherSession
from .utils import ExportColumn

PLACEMENT_COLUMNS = [
    ExportColumn('NIS', 'nis'),
    ExportColumn('Nama Siswa', 'student'),
    ExportColumn('Kelas', 'classroom'),
    ExportColumn('Jurusan', 'major'),
    ExportColumn('Perusahaan', 'company'),
    ExportColumn('Tanggal Mulai', 'start_date'),
    ExportColumn('Tanggal Selesai', 'end_date'),
    ExportColumn('Guru Pembimbing', 'teacher'),
    ExportColumn('Status', 'status'),
    ExportColumn('Nilai Akhir', 'final_grade'),
    ExportColumn('Keterangan', 'result'),
]


def grade_result(final_grade):
    if final_grade is None:
        return None
    pass_mark = Decimal(str(getattr(settings, 'PRAKERIN_PASS_MARK', 75)))
    return 'Lulus' if final_grade >= pass_mark else 'Belum Lulus'


def placement_rows(placements):
    rows = []
    for placement in placements.select_related('student__classroom', 'student__major', 'teacher'):
        student = placement.student
        rows.append({
            'nis': student.nis,
            'student': student.name,
            'classroom': student.classroom.name,
            'major': student.major.name,
            'company': placement.company_name,
            'start_date': placement.start_date,
            'end_date': placement.end_date,
            'teacher': placement.teacher.name if placement.teacher_id else None,
            'status': placement.get_status_display(),
            'final_grade': placement.final_grade,
            'result': grade_result(placement.final_grade),
        })
    return rows


def report_subtitle(session):
    school = School.objects.order_by('pk').first()
    if isinstance(session, KaprogSession):
        scope = f"Jurusan {session.major_name}"
    elif isinstance(session, TeacherSession):
        scope = "Siswa bimbingan"
    else:
        scope = "Semua Jurusan"
    return f"{school.name} - {scope}" if school else scope
