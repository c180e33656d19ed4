from datetime import timedelta

from django.contrib.sitemaps import Sitemap
from django.db.models import Q
from django.utils import timezone

from .models import Article, Category, Event


class ArticleSitemap(Sitemap):
    """Published articles; breaking news is re-crawled hourly."""
    priority = 0.8
    limit = 5000

    def items(self):
        return Article.objects.published().order_by("-published_at")

    def changefreq(self, obj):
        return "hourly" if obj.is_breaking_news else "daily"

    def lastmod(self, obj):
        return obj.updated_at


class CategorySitemap(Sitemap):
    changefreq = "weekly"
    priority = 0.8

    def items(self):
        return Category.objects.all()

    def lastmod(self, obj):
        return obj.updated_at


class EventSitemap(Sitemap):
    changefreq = "daily"
    priority = 0.6

    def items(self):
        return Event.objects.exclude(status=Event.Status.CANCELLED)

    def lastmod(self, obj):
        return obj.updated_at


class NewsSitemap(Sitemap):
    """Breaking or time-sensitive articles from the last 48 hours."""
    changefreq = "hourly"
    priority = 0.9

    def items(self):
        since = timezone.now() - timedelta(hours=48)
        return Article.objects.published().filter(
            Q(is_breaking_news=True) | Q(is_time_sensitive=True), published_at__gte=since
        )

    def lastmod(self, obj):
        return obj.updated_at


sitemaps = {
    "articles": ArticleSitemap,
    "categories": CategorySitemap,
    "events": EventSitemap,
    "news": NewsSitemap,
}
