from django.core.management.base import BaseCommand, CommandError

from prakerin.backup import loads_backup, restore_backup
from prakerin.exceptions import BackupError


class Command(BaseCommand):
    help = 'Replace the master tables with the contents of a JSON backup file'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Backup file written by backup_data')
        parser.add_argument('--yes', action='store_true', help='Do not ask for confirmation')

    def handle(self, *args, **options):
        if not options['yes']:
            answer = input('This deletes the current data before restoring. Continue? [y/N] ')
            if answer.strip().lower() != 'y':
                self.stdout.write('Restore cancelled.')
                return

        try:
            with open(options['path'], encoding='utf-8') as fh:
                counts = restore_backup(loads_backup(fh.read()))
        except OSError as exc:
            raise CommandError(f'Cannot read {options["path"]}: {exc}') from exc
        except BackupError as exc:
            raise CommandError(str(exc)) from exc

        summary = ', '.join(f'{table}: {count}' for table, count in counts.items())
        self.stdout.write(self.style.SUCCESS(f'Restore complete ({summary})'))
