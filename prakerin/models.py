from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


ROLE_ADMIN = 'admin'
ROLE_KAPROG = 'kaprog'
ROLE_PRINCIPAL = 'kepala_sekolah'
ROLE_TEACHER = 'guru_pembimbing'

SCORE_VALIDATORS = [MinValueValidator(0), MaxValueValidator(100)]


class School(models.Model):
    """School identity shown on exports."""
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    principal_name = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sekolah'

    def __str__(self):
        return self.name


class Major(models.Model):
    name = models.CharField(max_length=150, unique=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'jurusan'
        ordering = ['name']

    def __str__(self):
        return self.name


class Account(AbstractUser):
    ROLE_CHOICES = (
        (ROLE_ADMIN, 'Admin'),
        (ROLE_KAPROG, 'Kepala Program'),
        (ROLE_PRINCIPAL, 'Kepala Sekolah'),
        (ROLE_TEACHER, 'Guru Pembimbing'),
    )
    name = models.CharField(max_length=150, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_KAPROG, db_index=True)
    # Major by name; resolved on every data load, an unknown name grants nothing
    major_name = models.CharField(max_length=150, blank=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        db_table = 'users'

    def __str__(self):
        return f"{self.username} ({self.role})"


class ClassSection(models.Model):
    GRADE_LEVEL_CHOICES = ((10, 'X'), (11, 'XI'), (12, 'XII'))

    name = models.CharField(max_length=100)
    grade_level = models.PositiveSmallIntegerField(choices=GRADE_LEVEL_CHOICES, default=10)
    homeroom_teacher = models.CharField(max_length=150, blank=True)
    major = models.ForeignKey(Major, on_delete=models.CASCADE, related_name='classes', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        db_table = 'kelas'
        ordering = ['name']
        unique_together = ('name', 'major')

    def __str__(self):
        return f"{self.name} - {self.major.name}"


class Student(models.Model):
    GENDER_CHOICES = (('L', 'Laki-laki'), ('P', 'Perempuan'))

    nis = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=150)
    classroom = models.ForeignKey(ClassSection, on_delete=models.CASCADE, related_name='students', db_index=True)
    major = models.ForeignKey(Major, on_delete=models.CASCADE, related_name='students', db_index=True)
    gender = models.CharField(max_length=1, choices=GENDER_CHOICES, blank=True)
    birth_place = models.CharField(max_length=100, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    parent_name = models.CharField(max_length=150, blank=True)
    parent_phone = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        db_table = 'siswa'
        ordering = ['name']

    def __str__(self):
        return f"{self.nis} - {self.name}"

    def clean(self):
        if self.classroom_id and self.major_id and self.classroom.major_id != self.major_id:
            raise ValidationError({'classroom': 'Kelas tidak termasuk dalam jurusan siswa.'})


class SupervisingTeacher(models.Model):
    name = models.CharField(max_length=150)
    employee_number = models.CharField(max_length=30, blank=True)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    major = models.ForeignKey(Major, on_delete=models.SET_NULL, null=True, blank=True, related_name='teachers', db_index=True)
    account = models.OneToOneField(
        Account, on_delete=models.SET_NULL, null=True, blank=True, related_name='teacher_profile',
        limit_choices_to={'role': ROLE_TEACHER},
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        db_table = 'guru_pembimbing'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def username(self):
        return self.account.username if self.account_id else None


class Placement(models.Model):
    STATUS_ACTIVE = 'aktif'
    STATUS_FINISHED = 'selesai'
    STATUS_CANCELLED = 'batal'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Aktif'),
        (STATUS_FINISHED, 'Selesai'),
        (STATUS_CANCELLED, 'Batal'),
    )

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='placements', db_index=True)
    company_name = models.CharField(max_length=255, blank=True)
    company_address = models.TextField(blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    teacher = models.ForeignKey(
        SupervisingTeacher, on_delete=models.SET_NULL, null=True, blank=True, related_name='placements', db_index=True,
    )
    school_supervisor = models.CharField(max_length=150, blank=True)
    industry_supervisor = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    remarks = models.TextField(blank=True)
    # Derived by prakerin.grading; never edited through forms or the API.
    final_grade = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        db_table = 'prakerin'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student.name} @ {self.company_name or '-'}"

    def clean(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({'end_date': 'Tanggal selesai tidak boleh sebelum tanggal mulai.'})


class GuidanceLog(models.Model):
    placement = models.ForeignKey(Placement, on_delete=models.CASCADE, related_name='guidance_logs', db_index=True)
    teacher = models.ForeignKey(SupervisingTeacher, on_delete=models.CASCADE, related_name='guidance_logs', db_index=True)
    date = models.DateField(db_index=True)
    activity = models.TextField()
    notes = models.TextField(blank=True)
    signed_off = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bimbingan'
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.placement} - {self.date}"


class AssessmentItem(models.Model):
    CATEGORY_CHOICES = (
        ('industri', 'Industri'),
        ('sidang', 'Sidang'),
        ('laporan', 'Laporan'),
    )

    name = models.CharField(max_length=150)
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, default='industri')
    weight = models.PositiveIntegerField(default=1)
    major = models.ForeignKey(Major, on_delete=models.CASCADE, null=True, blank=True, related_name='assessment_items', db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'item_penilaian'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.category}, bobot {self.weight})"


class Score(models.Model):
    placement = models.ForeignKey(Placement, on_delete=models.CASCADE, related_name='scores', db_index=True)
    item = models.ForeignKey(AssessmentItem, on_delete=models.CASCADE, related_name='scores', db_index=True)
    value = models.DecimalField(max_digits=5, decimal_places=2, validators=SCORE_VALIDATORS)
    remark = models.TextField(blank=True)
    graded_by = models.ForeignKey(SupervisingTeacher, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'nilai_prakerin'
        ordering = ['-created_at']
        unique_together = ('placement', 'item')

    def __str__(self):
        return f"{self.placement} - {self.item.name}: {self.value}"


class ReportDefinition(models.Model):
    major = models.ForeignKey(Major, on_delete=models.CASCADE, related_name='report_definitions', db_index=True)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    deadline = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'laporan_prakerin'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.major.name})"


class ReportSubmission(models.Model):
    STATUS_PENDING = 'belum'
    STATUS_ON_TIME = 'tepat_waktu'
    STATUS_LATE = 'terlambat'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Belum'),
        (STATUS_ON_TIME, 'Tepat Waktu'),
        (STATUS_LATE, 'Terlambat'),
    )

    report = models.ForeignKey(ReportDefinition, on_delete=models.CASCADE, related_name='submissions', db_index=True)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='report_submissions', db_index=True)
    placement = models.ForeignKey(Placement, on_delete=models.SET_NULL, null=True, blank=True, related_name='report_submissions')
    submitted_on = models.DateField(null=True, blank=True)
    score = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=SCORE_VALIDATORS)
    status = models.CharField(max_length=12, choices=STATUS_CHOICES, default=STATUS_PENDING)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'pengumpulan_laporan'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student.name} - {self.report.title}: {self.status}"

    def derive_status(self):
        """Status implied by the submission date against the report deadline."""
        if not self.submitted_on:
            return self.STATUS_PENDING
        if self.submitted_on <= self.report.deadline:
            return self.STATUS_ON_TIME
        return self.STATUS_LATE


class DefenseSession(models.Model):
    major = models.ForeignKey(Major, on_delete=models.CASCADE, related_name='defense_sessions', db_index=True)
    name = models.CharField(max_length=200)
    date = models.DateField(db_index=True)
    start_time = models.TimeField()
    end_time = models.TimeField()
    room = models.CharField(max_length=100, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'jadwal_sidang'
        ordering = ['-date', 'start_time']

    def __str__(self):
        return f"{self.name} ({self.date})"

    def clean(self):
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            raise ValidationError({'end_time': 'Waktu selesai harus setelah waktu mulai.'})


class SessionParticipant(models.Model):
    session = models.ForeignKey(DefenseSession, on_delete=models.CASCADE, related_name='participants', db_index=True)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='defense_slots', db_index=True)
    placement = models.ForeignKey(Placement, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    order = models.PositiveIntegerField(default=1)
    score = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, validators=SCORE_VALIDATORS)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'peserta_sidang'
        ordering = ['order']
        unique_together = ('session', 'student')

    def __str__(self):
        return f"{self.session.name} #{self.order}: {self.student.name}"


class SessionExaminer(models.Model):
    ROLE_CHOICES = (
        ('ketua', 'Ketua'),
        ('sekretaris', 'Sekretaris'),
        ('penguji', 'Penguji'),
    )

    session = models.ForeignKey(DefenseSession, on_delete=models.CASCADE, related_name='examiners', db_index=True)
    teacher = models.ForeignKey(SupervisingTeacher, on_delete=models.CASCADE, related_name='examinations', db_index=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='penguji')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'penguji_sidang'
        unique_together = ('session', 'teacher')

    def __str__(self):
        return f"{self.session.name} - {self.teacher.name} ({self.role})"
