from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import (
    Account, AssessmentItem, ClassSection, DefenseSession, GuidanceLog, Major, Placement,
    ReportDefinition, ReportSubmission, School, Score, SessionExaminer, SessionParticipant,
    Student, SupervisingTeacher,
)


@admin.register(Account)
class AccountAdmin(UserAdmin):
    list_display = ('username', 'name', 'email', 'role', 'major_name', 'is_active')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'name', 'email', 'major_name')
    ordering = ('username',)

    fieldsets = UserAdmin.fieldsets + (
        ('Peran', {'fields': ('name', 'role', 'major_name')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Peran', {'fields': ('name', 'role', 'major_name')}),
    )


@admin.register(School)
class SchoolAdmin(admin.ModelAdmin):
    list_display = ('name', 'principal_name', 'phone', 'updated_at')
    search_fields = ('name',)


@admin.register(Major)
class MajorAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)


@admin.register(ClassSection)
class ClassSectionAdmin(admin.ModelAdmin):
    list_display = ('name', 'grade_level', 'major', 'homeroom_teacher')
    list_filter = ('major', 'grade_level')
    search_fields = ('name', 'homeroom_teacher')


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('nis', 'name', 'classroom', 'major', 'gender')
    list_filter = ('major', 'classroom', 'gender')
    search_fields = ('nis', 'name')


@admin.register(SupervisingTeacher)
class SupervisingTeacherAdmin(admin.ModelAdmin):
    list_display = ('name', 'employee_number', 'major', 'username')
    list_filter = ('major',)
    search_fields = ('name', 'employee_number')


@admin.register(Placement)
class PlacementAdmin(admin.ModelAdmin):
    list_display = ('student', 'company_name', 'teacher', 'status', 'final_grade', 'start_date', 'end_date')
    list_filter = ('status', 'student__major')
    search_fields = ('student__name', 'student__nis', 'company_name')
    readonly_fields = ('final_grade',)


@admin.register(GuidanceLog)
class GuidanceLogAdmin(admin.ModelAdmin):
    list_display = ('placement', 'teacher', 'date', 'signed_off')
    list_filter = ('signed_off', 'teacher')
    date_hierarchy = 'date'


@admin.register(AssessmentItem)
class AssessmentItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'weight', 'major')
    list_filter = ('category', 'major')


@admin.register(Score)
class ScoreAdmin(admin.ModelAdmin):
    list_display = ('placement', 'item', 'value', 'graded_by')
    list_filter = ('item__category',)
    search_fields = ('placement__student__name',)


@admin.register(ReportDefinition)
class ReportDefinitionAdmin(admin.ModelAdmin):
    list_display = ('title', 'major', 'deadline')
    list_filter = ('major',)


@admin.register(ReportSubmission)
class ReportSubmissionAdmin(admin.ModelAdmin):
    list_display = ('report', 'student', 'submitted_on', 'status', 'score')
    list_filter = ('status',)


class SessionParticipantInline(admin.TabularInline):
    model = SessionParticipant
    extra = 0


class SessionExaminerInline(admin.TabularInline):
    model = SessionExaminer
    extra = 0


@admin.register(DefenseSession)
class DefenseSessionAdmin(admin.ModelAdmin):
    list_display = ('name', 'major', 'date', 'start_time', 'end_time', 'room')
    list_filter = ('major',)
    inlines = [SessionParticipantInline, SessionExaminerInline]
