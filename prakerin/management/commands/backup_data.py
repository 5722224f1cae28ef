import os
from datetime import datetime

from django.conf import settings
from django.core.management.base import BaseCommand

from prakerin.backup import build_backup, dumps_backup


class Command(BaseCommand):
    help = 'Write the master tables to a JSON backup file'

    def add_arguments(self, parser):
        parser.add_argument('--output', help='Backup file path (default: backups/backup_<timestamp>.json)')

    def handle(self, *args, **options):
        backup_path = options['output']
        if not backup_path:
            backup_dir = os.path.join(settings.BASE_DIR, 'backups')
            os.makedirs(backup_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            backup_path = os.path.join(backup_dir, f'backup_{timestamp}.json')

        document = build_backup()
        with open(backup_path, 'w', encoding='utf-8') as fh:
            fh.write(dumps_backup(document))

        total = sum(len(rows) for rows in document['tables'].values())
        self.stdout.write(self.style.SUCCESS(f'Backed up {total} rows to {backup_path}'))
