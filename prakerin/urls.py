from django.urls import path, include
from rest_framework import routers

from . import views

router = routers.DefaultRouter()
router.register(r'schools', views.SchoolViewSet, basename='school')
router.register(r'majors', views.MajorViewSet, basename='major')
router.register(r'accounts', views.AccountViewSet, basename='account')
router.register(r'classes', views.ClassSectionViewSet, basename='class-section')
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'teachers', views.SupervisingTeacherViewSet, basename='teacher')
router.register(r'placements', views.PlacementViewSet, basename='placement')
router.register(r'guidance', views.GuidanceLogViewSet, basename='guidance')
router.register(r'assessment-items', views.AssessmentItemViewSet, basename='assessment-item')
router.register(r'scores', views.ScoreViewSet, basename='score')
router.register(r'reports', views.ReportDefinitionViewSet, basename='report')
router.register(r'report-submissions', views.ReportSubmissionViewSet, basename='report-submission')
router.register(r'defense-sessions', views.DefenseSessionViewSet, basename='defense-session')
router.register(r'defense-participants', views.SessionParticipantViewSet, basename='defense-participant')
router.register(r'defense-examiners', views.SessionExaminerViewSet, basename='defense-examiner')

urlpatterns = [
    path('api/', include(router.urls)),
    path('api/dashboard/', views.dashboard_view, name='dashboard'),
    path('api/roster/template/', views.roster_template_view, name='roster_template'),
    path('api/roster/import/', views.roster_import_view, name='roster_import'),
    path('api/roster/export/', views.roster_export_view, name='roster_export'),
    path('api/exports/placements/<str:file_format>/', views.placement_report_view, name='placement_report'),
    path('api/backup/', views.backup_view, name='backup'),
    path('api/restore/', views.restore_view, name='restore'),
]
