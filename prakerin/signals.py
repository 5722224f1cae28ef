from django.db.models.signals import post_save, post_delete, pre_save
from django.dispatch import receiver
from django.forms.models import model_to_dict

from .models import (
    Account, AssessmentItem, ClassSection, DefenseSession, GuidanceLog, Major, Placement,
    ReportDefinition, ReportSubmission, School, Score, SessionExaminer, SessionParticipant,
    Student, SupervisingTeacher,
)
from .realtime import ChangeEvent, DELETE, INSERT, UPDATE, publish
from .scope import forget_major

# Models whose changes are published to realtime subscribers
TRACKED_MODELS = [
    School, Major, Account, ClassSection, Student, SupervisingTeacher, Placement,
    GuidanceLog, AssessmentItem, Score, ReportDefinition, ReportSubmission,
    DefenseSession, SessionParticipant, SessionExaminer,
]


def _row(instance):
    exclude = ['password', 'groups', 'user_permissions'] if isinstance(instance, Account) else None
    data = model_to_dict(instance, exclude=exclude)
    data['id'] = instance.pk
    return data


def _publish(instance, event_type):
    publish(ChangeEvent(event_type=event_type, table=instance._meta.db_table, row=_row(instance)), instance)


@receiver(post_save)
def handle_post_save(sender, instance, created, raw=False, **kwargs):
    if sender not in TRACKED_MODELS or raw:
        return
    _publish(instance, INSERT if created else UPDATE)


@receiver(post_delete)
def handle_post_delete(sender, instance, **kwargs):
    if sender not in TRACKED_MODELS:
        return
    _publish(instance, DELETE)


@receiver(pre_save, sender=Major)
def forget_renamed_major(sender, instance, **kwargs):
    if instance.pk is None:
        return
    previous = Major.objects.filter(pk=instance.pk).values_list('name', flat=True).first()
    if previous and previous != instance.name:
        forget_major(previous)


@receiver(post_delete, sender=Major)
def forget_deleted_major(sender, instance, **kwargs):
    forget_major(instance.name)
