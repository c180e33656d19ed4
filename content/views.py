import logging

from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.core.exceptions import PermissionDenied
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .forms import ProfileUpdateForm, SubmissionForm, SubmissionReviewForm
from .models import (
    AdCampaign,
    AdSpace,
    Airdrop,
    Article,
    Category,
    CryptoExchangeListing,
    CryptocurrencyMeme,
    CryptocurrencyVideo,
    Event,
    Presale,
    Submission,
    UserProfile,
)
from .policies import SubmissionPolicy, is_admin
from .services.search_service import SearchService
from .services.stats_service import StatsService

logger = logging.getLogger(__name__)


class SlugDetailView(View):
    """Look a record up by its slug and return the listed fields as JSON."""

    model = None
    fields = ()

    def get_queryset(self):
        return self.model.objects.all()

    def serialize(self, obj):
        data = {field: getattr(obj, field) for field in self.fields}
        data["slug"] = obj.slug
        data["url"] = obj.get_absolute_url()
        return data

    def get(self, request, slug):
        obj = get_object_or_404(self.get_queryset(), slug=slug)
        return JsonResponse(self.serialize(obj))


class ArticleDetailView(SlugDetailView):
    model = Article
    fields = (
        "title",
        "excerpt",
        "content",
        "content_type",
        "status",
        "is_breaking_news",
        "view_count",
        "author_bio",
        "published_at",
    )

    def get_queryset(self):
        return Article.objects.published().select_related("category", "author")

    def get(self, request, slug):
        article = get_object_or_404(self.get_queryset(), slug=slug)
        article.increment_view_count()
        data = self.serialize(article)
        data["category"] = article.category.slug if article.category else None
        data["tags"] = list(article.tags.values_list("slug", flat=True))
        return JsonResponse(data)


class CategoryDetailView(SlugDetailView):
    model = Category
    fields = ("name", "description")

    def serialize(self, obj):
        data = super().serialize(obj)
        data["path"] = obj.get_full_path()
        data["articles"] = [
            {"title": article.title, "slug": article.slug}
            for article in obj.articles.published()[:20]
        ]
        return data


class EventDetailView(SlugDetailView):
    model = Event
    fields = ("title", "description", "type", "start_date", "end_date", "location", "is_virtual", "status")

    def serialize(self, obj):
        data = super().serialize(obj)
        data["country"] = obj.country.code or None
        data["is_full"] = obj.is_full()
        return data


class AirdropDetailView(SlugDetailView):
    model = Airdrop
    fields = ("name", "description", "token_symbol", "blockchain", "status", "time_remaining")


class PresaleDetailView(SlugDetailView):
    model = Presale
    fields = ("name", "description", "token_symbol", "stage", "launchpad", "status", "time_remaining")


class VideoDetailView(SlugDetailView):
    model = CryptocurrencyVideo
    fields = ("title", "description", "youtube_url", "youtube_id", "youtube_embed_url", "published_at")

    def get_queryset(self):
        return CryptocurrencyVideo.objects.filter(status=CryptocurrencyVideo.Status.PUBLISHED)


class MemeDetailView(SlugDetailView):
    model = CryptocurrencyMeme
    fields = ("title", "description", "image_url", "upvotes_count")

    def get_queryset(self):
        return CryptocurrencyMeme.objects.filter(status=CryptocurrencyMeme.Status.PUBLISHED)


class ExchangeListingDetailView(SlugDetailView):
    model = CryptoExchangeListing
    fields = ("name", "exchange", "token_symbol", "description", "listing_date", "trading_pairs")


def serialize_submission(submission):
    return {
        "title": submission.title,
        "slug": submission.slug,
        "type": submission.type,
        "status": submission.status,
        "description": submission.description,
        "feedback": submission.feedback,
        "created_at": submission.created_at,
    }


class SubmissionListCreateView(LoginRequiredMixin, View):
    def get(self, request):
        if not SubmissionPolicy.view_any(request.user):
            raise PermissionDenied
        submissions = Submission.objects.all()
        if not is_admin(request.user):
            submissions = submissions.filter(submitted_by=request.user)
        return JsonResponse({"results": [serialize_submission(s) for s in submissions[:50]]})

    def post(self, request):
        if not SubmissionPolicy.create(request.user):
            raise PermissionDenied
        form = SubmissionForm(request.POST)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors}, status=400)
        submission = form.save(commit=False)
        submission.submitted_by = request.user
        submission.save()
        logger.info(f"Submission '{submission.slug}' created by user {request.user.pk}")
        return JsonResponse({"slug": submission.slug, "status": submission.status}, status=201)


class SubmissionDetailView(LoginRequiredMixin, View):
    """Owners and admins can read a submission; only its owner can edit it."""

    def get(self, request, slug):
        submission = get_object_or_404(Submission, slug=slug)
        if not SubmissionPolicy.view(request.user, submission):
            raise PermissionDenied
        return JsonResponse(serialize_submission(submission))

    def post(self, request, slug):
        submission = get_object_or_404(Submission, slug=slug)
        if not SubmissionPolicy.update(request.user, submission):
            raise PermissionDenied
        form = SubmissionForm(request.POST, instance=submission)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors}, status=400)
        submission = form.save()
        logger.info(f"Submission {submission.pk} updated by user {request.user.pk}")
        return JsonResponse(serialize_submission(submission))


class SubmissionReviewView(LoginRequiredMixin, View):
    """Approve or reject a submission; only admins pass the policy check."""

    action = None

    def post(self, request, slug):
        submission = get_object_or_404(Submission, slug=slug)
        check = getattr(SubmissionPolicy, self.action)
        if not check(request.user, submission):
            raise PermissionDenied

        form = SubmissionReviewForm(request.POST)
        form.is_valid()
        feedback = form.cleaned_data.get("feedback", "")

        if self.action == "approve":
            submission.approve(request.user, feedback)
        else:
            if not feedback:
                return JsonResponse({"errors": {"feedback": ["Feedback is required."]}}, status=400)
            submission.reject(request.user, feedback)

        logger.info(f"Submission '{submission.slug}' {submission.status} by user {request.user.pk}")
        return JsonResponse({"slug": submission.slug, "status": submission.status})


class ProfileUpdateView(LoginRequiredMixin, View):
    def get(self, request):
        profile, _ = UserProfile.objects.get_or_create(user=request.user)
        return JsonResponse(
            {
                "name": profile.display_name,
                "email": request.user.email,
                "bio": profile.bio,
                "website": profile.website,
                "location": profile.location,
            }
        )

    def post(self, request):
        form = ProfileUpdateForm(request.POST, user=request.user)
        if not form.is_valid():
            return JsonResponse({"errors": form.errors}, status=400)
        form.save()
        return JsonResponse({"status": "Profile updated successfully."})


class DashboardStatsView(LoginRequiredMixin, UserPassesTestMixin, View):
    def test_func(self):
        return is_admin(self.request.user)

    def get(self, request):
        return JsonResponse(
            {
                "overview": StatsService.overview(),
                "articles": StatsService.article_overview(),
                "submissions": StatsService.submission_overview(),
            }
        )


class SearchView(View):
    def get(self, request):
        query = request.GET.get("query", "").strip()
        if not query:
            return JsonResponse({"results": []})
        results = SearchService.search(query, request.GET.get("type", "all"))
        return JsonResponse({"results": results, "query": query})


class AdSpaceDetailView(SlugDetailView):
    model = AdSpace
    fields = ("name", "location", "size", "is_premium")

    def get_queryset(self):
        return AdSpace.objects.active()

    def serialize(self, obj):
        data = super().serialize(obj)
        data["campaigns"] = [
            {
                "id": campaign.pk,
                "name": campaign.name,
                "ad_content": campaign.ad_content,
                "ad_image": campaign.ad_image,
                "ad_link": campaign.ad_link,
            }
            for campaign in obj.active_campaigns().approved()
        ]
        return data


@method_decorator(csrf_exempt, name="dispatch")
class AdCampaignTrackView(View):
    """Count an impression or a click against a running campaign."""

    event = None

    def post(self, request, pk):
        campaign = get_object_or_404(
            AdCampaign.objects.active().approved().select_related("ad_space"), pk=pk
        )
        if self.event == "click":
            campaign.increment_click_count()
        else:
            campaign.increment_impression_count()
        return JsonResponse({"id": campaign.pk, "event": self.event})
