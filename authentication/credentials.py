"""
Login credentials for supervising teachers.

A teacher logs in through an ``Account`` with the ``guru_pembimbing`` role
linked to their profile. Passwords are hashed with Django's configured
hasher before they reach the database.
"""
import logging

from django.contrib.auth.hashers import make_password
from django.db import IntegrityError, transaction

from prakerin.exceptions import CredentialError
from prakerin.models import Account, ROLE_TEACHER
from prakerin.serializers import MIN_PASSWORD_LENGTH

logger = logging.getLogger(__name__)


def issue_credentials(teacher, username, password):
    """
    Create or replace the login of ``teacher``.

    Returns the linked account. Raises ``CredentialError`` for a short
    password (before touching the database) or a username already in use.
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise CredentialError(f"Password minimal {MIN_PASSWORD_LENGTH} karakter")
    username = (username or '').strip()
    if not username:
        raise CredentialError("Username wajib diisi")

    hashed = make_password(password)
    try:
        with transaction.atomic():
            account = teacher.account if teacher.account_id else None
            if account is None:
                account = Account(role=ROLE_TEACHER)
            account.username = username
            account.password = hashed
            account.name = teacher.name
            account.email = teacher.email
            account.role = ROLE_TEACHER
            account.major_name = teacher.major.name if teacher.major_id else ''
            account.is_active = True
            account.save()
            if teacher.account_id != account.pk:
                teacher.account = account
                teacher.save(update_fields=['account', 'updated_at'])
    except IntegrityError as exc:
        logger.error("Failed to issue credentials for teacher %s: %s", teacher.pk, exc)
        raise CredentialError("Gagal membuat login") from exc

    logger.info("Issued credentials for teacher %s as %s", teacher.pk, username)
    return account


def revoke_credentials(teacher):
    """Deactivate the teacher's login; the profile and its history stay."""
    if not teacher.account_id:
        return False
    Account.objects.filter(pk=teacher.account_id).update(is_active=False)
    logger.info("Revoked credentials of teacher %s", teacher.pk)
    return True
