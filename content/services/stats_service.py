from django.contrib.auth import get_user_model
from django.db.models import Count, Q

from ..models import Article, Category, Submission, Tag


class StatsService:
    @staticmethod
    def overview():
        """Headline counts for the staff dashboard."""
        return {
            "articles": Article.objects.count(),
            "categories": Category.objects.count(),
            "tags": Tag.objects.count(),
            "users": get_user_model().objects.count(),
            "submissions": Submission.objects.count(),
        }

    @staticmethod
    def submission_overview():
        counts = Submission.objects.aggregate(
            total=Count("id"),
            pending=Count("id", filter=Q(status=Submission.Status.PENDING)),
            approved=Count("id", filter=Q(status=Submission.Status.APPROVED)),
            rejected=Count("id", filter=Q(status=Submission.Status.REJECTED)),
        )
        return counts

    @staticmethod
    def article_overview():
        return {
            "total": Article.objects.count(),
            "published": Article.objects.published().count(),
            "breaking": Article.objects.breaking_news().count(),
            "featured": Article.objects.featured().count(),
        }
