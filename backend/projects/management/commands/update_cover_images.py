from django.core.management.base import BaseCommand
from django.db import DatabaseError

from projects.models import Project


class Command(BaseCommand):
    help = "Backfill project cover images from their generated step images."

    def add_arguments(self, parser):
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report what would change without writing",
        )
        parser.add_argument(
            "--use-last-step",
            action="store_true",
            help="Use the last step with an image instead of the first",
        )

    def handle(self, *args, **options):
        dry_run: bool = bool(options.get("dry_run"))
        use_last: bool = bool(options.get("use_last_step"))

        updated = skipped = errors = 0
        projects = Project.objects.filter(steps__isnull=False).distinct().prefetch_related("steps")

        for project in projects:
            steps = [step for step in project.steps.all() if step.image_url]
            if not steps:
                self.stdout.write(f"  {project.id}: no step images, skipping")
                skipped += 1
                continue

            cover = steps[-1].image_url if use_last else steps[0].image_url
            if cover == project.cover_image_url:
                skipped += 1
                continue

            if dry_run:
                self.stdout.write(f"  {project.id}: would set cover to {cover}")
                updated += 1
                continue

            try:
                project.cover_image_url = cover
                project.save(update_fields=["cover_image_url"])
            except DatabaseError as exc:
                self.stderr.write(self.style.ERROR(f"  {project.id}: {exc}"))
                errors += 1
                continue

            self.stdout.write(f"  {project.id}: cover set to {cover}")
            updated += 1

        prefix = "[dry run] " if dry_run else ""
        self.stdout.write(self.style.SUCCESS(
            f"{prefix}Updated: {updated}, skipped: {skipped}, errors: {errors}"
        ))
