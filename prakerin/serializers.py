from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import (
    Account, AssessmentItem, ClassSection, DefenseSession, GuidanceLog, Major, Placement,
    ReportDefinition, ReportSubmission, School, Score, SessionExaminer, SessionParticipant,
    Student, SupervisingTeacher, ROLE_KAPROG,
)

MIN_PASSWORD_LENGTH = 6


class SchoolSerializer(serializers.ModelSerializer):
    class Meta:
        model = School
        fields = '__all__'


class MajorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Major
        fields = '__all__'


class AccountSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=MIN_PASSWORD_LENGTH)

    class Meta:
        model = Account
        fields = ['id', 'username', 'name', 'email', 'role', 'major_name', 'is_active', 'password', 'updated_at']
        read_only_fields = ['updated_at']

    def validate(self, attrs):
        role = attrs.get('role', getattr(self.instance, 'role', None))
        major_name = attrs.get('major_name', getattr(self.instance, 'major_name', ''))
        if role == ROLE_KAPROG and not major_name:
            raise serializers.ValidationError({'major_name': 'Kepala program wajib memiliki jurusan.'})
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'Password wajib diisi.'})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        return Account.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        instance = super().update(instance, validated_data)
        if password:
            instance.set_password(password)
            instance.save(update_fields=['password'])
        return instance


class ClassSectionSerializer(serializers.ModelSerializer):
    major_name = serializers.CharField(source='major.name', read_only=True)
    student_count = serializers.IntegerField(source='students.count', read_only=True)

    class Meta:
        model = ClassSection
        fields = '__all__'


class StudentSerializer(serializers.ModelSerializer):
    classroom_name = serializers.CharField(source='classroom.name', read_only=True)
    major_name = serializers.CharField(source='major.name', read_only=True)

    class Meta:
        model = Student
        fields = '__all__'

    def validate(self, attrs):
        classroom = attrs.get('classroom', getattr(self.instance, 'classroom', None))
        major = attrs.get('major', getattr(self.instance, 'major', None))
        if classroom is not None and major is not None and classroom.major_id != major.pk:
            raise serializers.ValidationError({'classroom': 'Kelas tidak termasuk dalam jurusan siswa.'})
        return attrs


class SupervisingTeacherSerializer(serializers.ModelSerializer):
    major_name = serializers.CharField(source='major.name', read_only=True, default=None)
    username = serializers.CharField(read_only=True)
    placement_count = serializers.IntegerField(source='placements.count', read_only=True)

    class Meta:
        model = SupervisingTeacher
        fields = '__all__'
        read_only_fields = ['account']


class CredentialSerializer(serializers.Serializer):
    """Username and password a program head issues to a supervising teacher."""
    username = serializers.RegexField(r'^[A-Za-z0-9._@-]{3,50}$')
    password = serializers.CharField(min_length=MIN_PASSWORD_LENGTH, max_length=128, write_only=True)
    password_confirm = serializers.CharField(write_only=True, required=False)

    def validate(self, attrs):
        confirm = attrs.pop('password_confirm', None)
        if confirm is not None and confirm != attrs['password']:
            raise serializers.ValidationError({'password_confirm': 'Konfirmasi password tidak sama.'})
        return attrs


class PasswordChangeSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(min_length=MIN_PASSWORD_LENGTH, write_only=True)

    def validate_new_password(self, value):
        validate_password(value, self.context.get('user'))
        return value


class PlacementSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    student_nis = serializers.CharField(source='student.nis', read_only=True)
    classroom_name = serializers.CharField(source='student.classroom.name', read_only=True)
    major_name = serializers.CharField(source='student.major.name', read_only=True)
    teacher_name = serializers.CharField(source='teacher.name', read_only=True, default=None)

    class Meta:
        model = Placement
        fields = '__all__'
        read_only_fields = ['final_grade']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'Tanggal selesai tidak boleh sebelum tanggal mulai.'})
        return attrs


class GuidanceLogSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='placement.student.name', read_only=True)
    teacher_name = serializers.CharField(source='teacher.name', read_only=True)

    class Meta:
        model = GuidanceLog
        fields = '__all__'


class AssessmentItemSerializer(serializers.ModelSerializer):
    major_name = serializers.CharField(source='major.name', read_only=True, default=None)

    class Meta:
        model = AssessmentItem
        fields = '__all__'

    def validate_weight(self, value):
        if value <= 0:
            raise serializers.ValidationError('Bobot harus lebih dari 0.')
        return value


class ScoreSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    student_name = serializers.CharField(source='placement.student.name', read_only=True)

    class Meta:
        model = Score
        fields = '__all__'
        read_only_fields = ['graded_by']
        # (placement, item) is upserted by prakerin.grading.record_score
        validators = []


class ReportDefinitionSerializer(serializers.ModelSerializer):
    major_name = serializers.CharField(source='major.name', read_only=True)

    class Meta:
        model = ReportDefinition
        fields = '__all__'


class ReportSubmissionSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    report_title = serializers.CharField(source='report.title', read_only=True)
    status = serializers.ChoiceField(choices=ReportSubmission.STATUS_CHOICES, required=False)

    class Meta:
        model = ReportSubmission
        fields = '__all__'

    def validate(self, attrs):
        report = attrs.get('report', getattr(self.instance, 'report', None))
        student = attrs.get('student', getattr(self.instance, 'student', None))
        if report is not None and student is not None and report.major_id != student.major_id:
            raise serializers.ValidationError({'student': 'Siswa tidak termasuk dalam jurusan laporan.'})
        if 'status' not in attrs and report is not None:
            submitted_on = attrs.get('submitted_on', getattr(self.instance, 'submitted_on', None))
            attrs['status'] = ReportSubmission(report=report, submitted_on=submitted_on).derive_status()
        return attrs


class SessionParticipantSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)

    class Meta:
        model = SessionParticipant
        fields = '__all__'


class SessionExaminerSerializer(serializers.ModelSerializer):
    teacher_name = serializers.CharField(source='teacher.name', read_only=True)

    class Meta:
        model = SessionExaminer
        fields = '__all__'


class DefenseSessionSerializer(serializers.ModelSerializer):
    major_name = serializers.CharField(source='major.name', read_only=True)
    participants = SessionParticipantSerializer(many=True, read_only=True)
    examiners = SessionExaminerSerializer(many=True, read_only=True)

    class Meta:
        model = DefenseSession
        fields = '__all__'

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': 'Waktu selesai harus setelah waktu mulai.'})
        return attrs
