"""
Management command to backfill slugs through the slug service.

Usage:
    python manage.py regenerate_slugs                 # Fill empty slugs on every sluggable model
    python manage.py regenerate_slugs --model article # Only one model (by model name)
    python manage.py regenerate_slugs --stale         # Also re-derive slugs that no longer match their source
    python manage.py regenerate_slugs --dry-run       # Preview without making changes

Rows written with QuerySet.update() or bulk_create() never pass through the
save signals, so their slugs can be empty or describe an old title. --stale
rewrites every slug that is neither the source's slug nor a numbered variant
of it, which includes hand-picked slugs.
"""
from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from content.services.slug_service import get_slug_config, slug_service, sluggable_models


class Command(BaseCommand):
    help = "Derive slugs for rows whose slug is empty, or out of date with --stale."

    def add_arguments(self, parser):
        parser.add_argument(
            "--model",
            help="Model name to process (e.g. article, category). Defaults to all.",
        )
        parser.add_argument(
            "--stale",
            action="store_true",
            help="Also re-derive slugs that do not match the current source. Overwrites custom slugs.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Preview changes without making them.",
        )

    def handle(self, *args, **options):
        models = sluggable_models()
        if options["model"]:
            models = [m for m in models if m._meta.model_name == options["model"].lower()]
            if not models:
                raise CommandError(f"Unknown sluggable model: {options['model']}")

        dry_run = options["dry_run"]
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN - no changes will be made"))

        total = 0
        for model in models:
            count = self.process(model, stale=options["stale"], dry_run=dry_run)
            if count:
                self.stdout.write(f"{model.__name__}: {count} slug(s)")
            total += count

        verb = "Would update" if dry_run else "Updated"
        self.stdout.write(self.style.SUCCESS(f"{verb} {total} slug(s)"))

    def process(self, model, stale=False, dry_run=False) -> int:
        config = get_slug_config(model)
        queryset = model._base_manager.order_by("pk")
        if not stale:
            queryset = queryset.filter(**{config.slug_field: ""})

        count = 0
        for instance in queryset.iterator():
            current = config.get_slug(instance)
            if current and slug_service.is_current(instance, config):
                continue
            slug = slug_service.derive_slug(instance, config)
            if slug == current:
                continue
            if dry_run:
                self.stdout.write(f"  {model.__name__}#{instance.pk}: would set '{slug}' (was '{current}')")
            else:
                config.set_slug(instance, slug)
                instance.save(update_fields=[config.slug_field])
            count += 1
        return count
