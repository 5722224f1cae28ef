"""
Whole-database backup and restore of the master tables as one JSON
document: ``{"timestamp": ..., "tables": {"sekolah": [...], ...}}``.
"""
import json
import logging

from django.core.serializers.json import DjangoJSONEncoder
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from .exceptions import BackupError
from .models import Account, ClassSection, Major, Placement, School, Student, SupervisingTeacher

logger = logging.getLogger(__name__)

# Parents before children; restore inserts in this order and deletes in reverse
BACKUP_TABLES = [
    ('sekolah', School),
    ('jurusan', Major),
    ('users', Account),
    ('guru_pembimbing', SupervisingTeacher),
    ('kelas', ClassSection),
    ('siswa', Student),
    ('prakerin', Placement),
]


def build_backup():
    """Backup document for every table in ``BACKUP_TABLES``."""
    tables = {name: list(model.objects.order_by('pk').values()) for name, model in BACKUP_TABLES}
    logger.info("Backup built: %s", {name: len(rows) for name, rows in tables.items()})
    return {'timestamp': timezone.now().isoformat(), 'tables': tables}


def dumps_backup(document):
    return json.dumps(document, cls=DjangoJSONEncoder, indent=2)


def loads_backup(text):
    try:
        document = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise BackupError('Format file backup tidak valid') from exc
    return document


def restore_backup(document):
    """
    Replace the backed up tables with the rows of ``document``.

    Children are deleted before parents and parents inserted before
    children. The whole restore runs in one transaction. Returns the
    number of rows inserted per table.
    """
    if not isinstance(document, dict) or not isinstance(document.get('tables'), dict):
        raise BackupError('Format file backup tidak valid')
    tables = document['tables']

    counts = {}
    logger.info("Restoring backup taken at %s", document.get('timestamp'))
    with transaction.atomic():
        for name, model in reversed(BACKUP_TABLES):
            model.objects.all().delete()
        for name, model in BACKUP_TABLES:
            rows = tables.get(name) or []
            try:
                model.objects.bulk_create([model(**row) for row in rows])
            except (TypeError, ValueError, ValidationError, IntegrityError) as exc:
                raise BackupError(f'Data tabel {name} tidak valid') from exc
            counts[name] = len(rows)
    logger.info("Backup restored: %s", counts)
    return counts
