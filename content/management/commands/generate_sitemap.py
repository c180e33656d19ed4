"""
Write sitemap.xml and news-sitemap.xml to disk.

Usage:
    python manage.py generate_sitemap
    python manage.py generate_sitemap --output-dir /var/www/public
"""
from __future__ import annotations

import logging
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand
from django.template.loader import render_to_string

from content.sitemaps import ArticleSitemap, CategorySitemap, EventSitemap, NewsSitemap

logger = logging.getLogger(__name__)

STATIC_PAGES = [
    ("/", "daily", 1.0),
    ("/articles/", "daily", 0.9),
    ("/legal/terms/", "monthly", 0.5),
    ("/legal/privacy/", "monthly", 0.5),
]


def _resolve(sitemap, name, item):
    value = getattr(sitemap, name, None)
    return value(item) if callable(value) else value


class Command(BaseCommand):
    help = "Generate the sitemap files."

    def add_arguments(self, parser):
        parser.add_argument(
            "--output-dir",
            default=str(settings.BASE_DIR / "public"),
            help="Directory to write the sitemap files into.",
        )

    def build_urls(self, sitemap_classes):
        site_url = settings.SITE_URL.rstrip("/")
        urls = []
        for sitemap_class in sitemap_classes:
            sitemap = sitemap_class()
            for item in sitemap.items():
                urls.append(
                    {
                        "location": f"{site_url}{item.get_absolute_url()}",
                        "lastmod": sitemap.lastmod(item),
                        "changefreq": _resolve(sitemap, "changefreq", item),
                        "priority": _resolve(sitemap, "priority", item),
                    }
                )
        return urls

    def handle(self, *args, **options):
        output_dir = Path(options["output_dir"])
        output_dir.mkdir(parents=True, exist_ok=True)
        site_url = settings.SITE_URL.rstrip("/")

        self.stdout.write("Generating sitemap...")
        urls = [
            {"location": f"{site_url}{path}", "changefreq": freq, "priority": str(priority)}
            for path, freq, priority in STATIC_PAGES
        ]
        urls += self.build_urls([ArticleSitemap, CategorySitemap, EventSitemap])
        self._write(output_dir / "sitemap.xml", urls)

        news_urls = self.build_urls([NewsSitemap])
        self._write(output_dir / "news-sitemap.xml", news_urls)

        self.stdout.write(
            self.style.SUCCESS(f"Wrote {len(urls)} URLs to sitemap.xml, {len(news_urls)} to news-sitemap.xml")
        )

    def _write(self, path: Path, urls):
        xml = render_to_string("sitemap.xml", {"urlset": urls})
        path.write_text(xml, encoding="utf-8")
        logger.info(f"Sitemap written to {path}")
