import logging

from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response

from authentication.credentials import issue_credentials, revoke_credentials
from authentication.permissions import CanExport, HasSession, IsAdminRole

from . import policy
from .backup import build_backup, dumps_backup, loads_backup, restore_backup
from .exceptions import BackupError
from .grading import delete_score, record_score, recompute_final_grade
from .mixins import StandardViewSet
from .models import (
    Account, AssessmentItem, ClassSection, DefenseSession, GuidanceLog, Major, Placement,
    ReportDefinition, ReportSubmission, School, Score, SessionExaminer, SessionParticipant,
    Student, SupervisingTeacher,
)
from .reports import PLACEMENT_COLUMNS, placement_rows, report_subtitle
from .roster import build_roster_template, export_roster, import_roster, parse_roster
from .scope import scope_queryset
from .serializers import (
    AccountSerializer, AssessmentItemSerializer, ClassSectionSerializer, CredentialSerializer,
    DefenseSessionSerializer, GuidanceLogSerializer, MajorSerializer, PlacementSerializer,
    ReportDefinitionSerializer, ReportSubmissionSerializer, SchoolSerializer, ScoreSerializer,
    SessionExaminerSerializer, SessionParticipantSerializer, StudentSerializer,
    SupervisingTeacherSerializer,
)
from .session import TeacherSession, describe_session, get_current_session
from .utils import export_filename, export_table

logger = logging.getLogger(__name__)


def parse_id(value, field):
    """Integer id from a request parameter; anything else is a 400 for ``field``."""
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError({field: 'ID tidak valid.'}) from exc


class SchoolViewSet(StandardViewSet):
    queryset = School.objects.all()
    serializer_class = SchoolSerializer
    resource = policy.SCHOOL


class MajorViewSet(StandardViewSet):
    queryset = Major.objects.all()
    serializer_class = MajorSerializer
    resource = policy.MAJOR
    search_fields = ('name',)


class AccountViewSet(StandardViewSet):
    queryset = Account.objects.order_by('username')
    serializer_class = AccountSerializer
    resource = policy.ACCOUNT
    search_fields = ('username', 'name')


class ClassSectionViewSet(StandardViewSet):
    queryset = ClassSection.objects.select_related('major')
    serializer_class = ClassSectionSerializer
    resource = policy.CLASS_SECTION
    search_fields = ('name', 'homeroom_teacher')
    scoped_fields = ('major',)


class StudentViewSet(StandardViewSet):
    queryset = Student.objects.select_related('classroom', 'major')
    serializer_class = StudentSerializer
    resource = policy.STUDENT
    search_fields = ('nis', 'name')
    scoped_fields = ('classroom', 'major')

    def get_queryset(self):
        queryset = super().get_queryset()
        classroom = self.request.query_params.get('classroom')
        if classroom:
            queryset = queryset.filter(classroom_id=parse_id(classroom, 'classroom'))
        return queryset


class SupervisingTeacherViewSet(StandardViewSet):
    queryset = SupervisingTeacher.objects.select_related('major', 'account')
    serializer_class = SupervisingTeacherSerializer
    resource = policy.TEACHER
    search_fields = ('name', 'employee_number')
    scoped_fields = ('major',)

    @action(detail=True, methods=['post'])
    def credentials(self, request, pk=None):
        """Issue or replace the teacher's login."""
        teacher = self.get_object()
        serializer = CredentialSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        account = issue_credentials(teacher, **serializer.validated_data)
        return Response({'success': True, 'username': account.username})

    @action(detail=True, methods=['post'])
    def revoke(self, request, pk=None):
        teacher = self.get_object()
        return Response({'success': revoke_credentials(teacher)})


class PlacementViewSet(StandardViewSet):
    queryset = Placement.objects.select_related('student__classroom', 'student__major', 'teacher')
    serializer_class = PlacementSerializer
    resource = policy.PLACEMENT
    search_fields = ('student__name', 'student__nis', 'company_name')
    scoped_fields = ('student', 'teacher')

    def get_queryset(self):
        queryset = super().get_queryset()
        placement_status = self.request.query_params.get('status')
        if placement_status:
            queryset = queryset.filter(status=placement_status)
        return queryset

    @action(detail=True, methods=['post'])
    def recompute(self, request, pk=None):
        """Recompute the final grade from the stored scores."""
        placement = self.get_object()
        result = recompute_final_grade(placement.pk, request.data.get('strategy'))
        return Response({'final_grade': result.as_dict()})


class GuidanceLogViewSet(StandardViewSet):
    queryset = GuidanceLog.objects.select_related('placement__student', 'teacher')
    serializer_class = GuidanceLogSerializer
    resource = policy.GUIDANCE
    search_fields = ('activity', 'placement__student__name')
    scoped_fields = ('placement', 'teacher')


class AssessmentItemViewSet(StandardViewSet):
    queryset = AssessmentItem.objects.select_related('major')
    serializer_class = AssessmentItemSerializer
    resource = policy.ASSESSMENT_ITEM
    search_fields = ('name',)
    scoped_fields = ('major',)


class ScoreViewSet(StandardViewSet):
    """
    Scores are upserted per (placement, item); every write answers with the
    outcome of the final grade recomputation it triggered.
    """
    queryset = Score.objects.select_related('placement__student', 'item')
    serializer_class = ScoreSerializer
    resource = policy.SCORE
    scoped_fields = ('placement', 'item')

    def get_queryset(self):
        queryset = super().get_queryset()
        placement = self.request.query_params.get('placement')
        if placement:
            queryset = queryset.filter(placement_id=parse_id(placement, 'placement'))
        return queryset

    def _grader(self):
        session = self.get_session()
        if isinstance(session, TeacherSession):
            return SupervisingTeacher.objects.get(pk=session.teacher_id)
        return None

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.check_references(serializer.validated_data)
        data = serializer.validated_data
        score, created, result = record_score(
            data['placement'], data['item'], data['value'],
            remark=data.get('remark', ''), graded_by=self._grader(),
        )
        body = dict(self.get_serializer(score).data, final_grade=result.as_dict())
        return Response(body, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        score = self.get_object()
        serializer = self.get_serializer(score, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.check_references(serializer.validated_data)
        data = serializer.validated_data
        placement = data.get('placement', score.placement)
        item = data.get('item', score.item)
        if (placement.pk, item.pk) != (score.placement_id, score.item_id):
            delete_score(score)
        score, _, result = record_score(
            placement, item, data.get('value', score.value),
            remark=data.get('remark', score.remark), graded_by=self._grader(),
        )
        return Response(dict(self.get_serializer(score).data, final_grade=result.as_dict()))

    def destroy(self, request, *args, **kwargs):
        result = delete_score(self.get_object())
        return Response({'success': True, 'final_grade': result.as_dict()})


class ReportDefinitionViewSet(StandardViewSet):
    queryset = ReportDefinition.objects.select_related('major')
    serializer_class = ReportDefinitionSerializer
    resource = policy.REPORT
    search_fields = ('title',)
    scoped_fields = ('major',)


class ReportSubmissionViewSet(StandardViewSet):
    queryset = ReportSubmission.objects.select_related('report', 'student')
    serializer_class = ReportSubmissionSerializer
    resource = policy.REPORT
    search_fields = ('student__name', 'student__nis')
    scoped_fields = ('report', 'student', 'placement')


class DefenseSessionViewSet(StandardViewSet):
    queryset = DefenseSession.objects.select_related('major').prefetch_related('participants', 'examiners')
    serializer_class = DefenseSessionSerializer
    resource = policy.DEFENSE_SESSION
    search_fields = ('name', 'room')
    scoped_fields = ('major',)


class SessionParticipantViewSet(StandardViewSet):
    queryset = SessionParticipant.objects.select_related('session', 'student')
    serializer_class = SessionParticipantSerializer
    resource = policy.DEFENSE_SESSION
    scoped_fields = ('session', 'student', 'placement')


class SessionExaminerViewSet(StandardViewSet):
    queryset = SessionExaminer.objects.select_related('session', 'teacher')
    serializer_class = SessionExaminerSerializer
    resource = policy.DEFENSE_SESSION
    scoped_fields = ('session', 'teacher')


@api_view(['GET'])
@permission_classes([HasSession])
def dashboard_view(request):
    """Record counts visible to the caller."""
    session = get_current_session(request)
    placements = scope_queryset(session, Placement.objects.all())
    return Response({
        'session': describe_session(session),
        'students': scope_queryset(session, Student.objects.all()).count(),
        'majors': scope_queryset(session, Major.objects.all()).count(),
        'classes': scope_queryset(session, ClassSection.objects.all()).count(),
        'placements': placements.count(),
        'active_placements': placements.filter(status=Placement.STATUS_ACTIVE).count(),
    })


def _csv_response(content, filename):
    response = HttpResponse(content, content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}.csv"'
    return response


@api_view(['GET'])
@permission_classes([HasSession])
def roster_template_view(request):
    return _csv_response(build_roster_template(), 'template_import_siswa')


@api_view(['POST'])
@permission_classes([HasSession])
def roster_import_view(request):
    """
    Import students from a roster CSV into one class.

    Without ``confirm`` the parsed rows are returned for preview and nothing
    is written.
    """
    session = get_current_session(request)
    if not policy.can_edit_student(session.role):
        raise PermissionDenied('Hanya admin yang dapat mengimpor siswa.')

    upload = request.FILES.get('file')
    if upload is not None:
        text = upload.read().decode('utf-8-sig')
    else:
        text = request.data.get('content', '')
    rows = parse_roster(text)
    if not rows:
        raise ValidationError({'file': 'File CSV kosong atau tidak valid.'})

    confirm = str(request.data.get('confirm', '')).lower() in ('1', 'true', 'yes')
    if not confirm:
        return Response({
            'rows': [
                {'line': row.line, 'nis': row.nis, 'name': row.name, 'errors': row.errors}
                for row in rows
            ],
            'valid': sum(1 for row in rows if row.is_valid),
            'invalid': sum(1 for row in rows if not row.is_valid),
        })

    classroom_id = parse_id(request.data.get('classroom'), 'classroom')
    major_id = parse_id(request.data.get('major'), 'major')
    classroom = get_object_or_404(scope_queryset(session, ClassSection.objects.all()), pk=classroom_id)
    major = get_object_or_404(scope_queryset(session, Major.objects.all()), pk=major_id)
    created, skipped = import_roster(rows, classroom, major)
    return Response({'success': True, 'created': created, 'skipped': skipped})


@api_view(['GET'])
@permission_classes([CanExport])
def roster_export_view(request):
    session = get_current_session(request)
    students = scope_queryset(session, Student.objects.all())
    classroom = request.query_params.get('classroom')
    if classroom:
        students = students.filter(classroom_id=parse_id(classroom, 'classroom'))
    return _csv_response(export_roster(students), export_filename('data_siswa'))


@api_view(['GET'])
@permission_classes([CanExport])
def placement_report_view(request, file_format):
    """Placement report as csv, pdf or xlsx, limited to the caller's scope."""
    session = get_current_session(request)
    placements = scope_queryset(session, Placement.objects.all())
    placement_status = request.query_params.get('status')
    if placement_status:
        placements = placements.filter(status=placement_status)
    return export_table(
        file_format,
        export_filename('laporan_prakerin'),
        'Laporan Prakerin',
        PLACEMENT_COLUMNS,
        placement_rows(placements),
        subtitle=report_subtitle(session),
    )


@api_view(['GET'])
@permission_classes([IsAdminRole])
def backup_view(request):
    logger.info("Backup requested by %s", request.user.username)
    document = build_backup()
    response = HttpResponse(dumps_backup(document), content_type='application/json')
    response['Content-Disposition'] = f'attachment; filename="{export_filename("backup")}.json"'
    return response


@api_view(['POST'])
@permission_classes([IsAdminRole])
def restore_view(request):
    """Replace the core tables with an uploaded backup document."""
    upload = request.FILES.get('file')
    if upload is not None:
        document = loads_backup(upload.read().decode('utf-8'))
    elif isinstance(request.data, dict) and 'tables' in request.data:
        document = dict(request.data)
    else:
        raise BackupError('Format file backup tidak valid')
    logger.info("Restore requested by %s", request.user.username)
    counts = restore_backup(document)
    return Response({'success': True, 'restored': counts})
