from django.contrib import admin, messages
from django.utils import timezone

from .forms import AdCampaignForm
from .models import (
    AdCampaign,
    AdSpace,
    Airdrop,
    Article,
    AuditLog,
    Category,
    Comment,
    CryptoExchangeListing,
    CryptocurrencyMeme,
    CryptocurrencyVideo,
    Event,
    Presale,
    Submission,
    Tag,
    UserProfile,
)
from .policies import SubmissionPolicy, is_admin


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0
    fields = ["user", "body", "is_approved", "created_at"]
    readonly_fields = ["created_at"]


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ["user", "display_name", "is_admin", "is_influencer", "created_at"]
    list_filter = ["is_admin", "is_influencer"]
    search_fields = ["user__email", "user__username", "display_name"]
    actions = ["make_influencer", "remove_influencer"]

    @admin.action(description="Mark selected users as influencers")
    def make_influencer(self, request, queryset):
        queryset.update(is_influencer=True)

    @admin.action(description="Remove influencer flag")
    def remove_influencer(self, request, queryset):
        queryset.update(is_influencer=False)


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "parent", "order", "article_count"]
    list_filter = ["parent"]
    search_fields = ["name", "description"]


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "usage_count", "trending_score", "last_used_at"]
    search_fields = ["name"]


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "content_type",
        "status",
        "category",
        "author",
        "is_breaking_news",
        "is_featured",
        "view_count",
        "published_at",
    ]
    list_filter = ["status", "content_type", "is_breaking_news", "is_featured", "is_trending", "category"]
    search_fields = ["title", "excerpt", "content"]
    date_hierarchy = "published_at"
    filter_horizontal = ["tags"]
    readonly_fields = ["view_count", "slides_count", "created_at", "updated_at"]
    inlines = [CommentInline]
    actions = ["publish_articles", "unpublish_articles"]
    fieldsets = (
        ("Basic Information", {"fields": ("title", "slug", "content_type", "category", "tags", "author")}),
        ("Content", {"fields": ("excerpt", "content", "author_bio", "source")}),
        (
            "Web Story",
            {"fields": ("story_slides", "slides_count"), "classes": ("collapse",)},
        ),
        (
            "Status",
            {
                "fields": (
                    "status",
                    "is_breaking_news",
                    "is_featured",
                    "is_trending",
                    "is_time_sensitive",
                    "published_at",
                )
            },
        ),
        ("SEO", {"fields": ("meta_title", "meta_description"), "classes": ("collapse",)}),
        ("Stats", {"fields": ("view_count", "created_at", "updated_at")}),
    )

    @admin.action(description="Publish selected articles")
    def publish_articles(self, request, queryset):
        for article in queryset:
            article.publish()

    @admin.action(description="Move selected articles back to draft")
    def unpublish_articles(self, request, queryset):
        for article in queryset:
            article.unpublish()


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "type", "start_date", "country", "is_virtual", "status"]
    list_filter = ["status", "is_virtual", "type"]
    search_fields = ["title", "location"]
    date_hierarchy = "start_date"


@admin.register(Airdrop)
class AirdropAdmin(admin.ModelAdmin):
    list_display = ["name", "token_symbol", "blockchain", "status", "start_date", "end_date", "is_featured"]
    list_filter = ["status", "blockchain", "is_featured"]
    search_fields = ["name", "token_symbol"]


@admin.register(Presale)
class PresaleAdmin(admin.ModelAdmin):
    list_display = ["name", "token_symbol", "stage", "launchpad", "status", "start_date", "end_date"]
    list_filter = ["status", "stage"]
    search_fields = ["name", "token_symbol", "launchpad"]


@admin.register(CryptocurrencyVideo)
class CryptocurrencyVideoAdmin(admin.ModelAdmin):
    list_display = ["title", "category", "status", "is_featured", "view_count", "published_at"]
    list_filter = ["status", "is_featured", "category"]
    search_fields = ["title", "description"]


@admin.register(CryptocurrencyMeme)
class CryptocurrencyMemeAdmin(admin.ModelAdmin):
    list_display = ["title", "category", "status", "upvotes_count", "created_at"]
    list_filter = ["status", "category"]
    search_fields = ["title"]


@admin.register(CryptoExchangeListing)
class CryptoExchangeListingAdmin(admin.ModelAdmin):
    list_display = ["name", "exchange", "token_symbol", "listing_date", "is_featured"]
    list_filter = ["exchange", "is_featured"]
    search_fields = ["name", "token_symbol", "exchange"]


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ["title", "type", "status", "submitted_by", "reviewed_by", "created_at"]
    list_filter = ["status", "type", "created_at"]
    search_fields = ["title", "submitted_by__email", "description"]
    readonly_fields = ["reviewed_by", "reviewed_at", "created_at", "updated_at"]
    actions = ["approve_submissions", "reject_submissions"]

    def has_delete_permission(self, request, obj=None):
        if obj is None:
            return super().has_delete_permission(request)
        return SubmissionPolicy.delete(request.user, obj)

    @admin.action(description="Approve selected submissions")
    def approve_submissions(self, request, queryset):
        if not is_admin(request.user):
            self.message_user(request, "Only admins can approve submissions.", messages.ERROR)
            return
        for submission in queryset:
            submission.approve(request.user)

    @admin.action(description="Reject selected submissions")
    def reject_submissions(self, request, queryset):
        if not is_admin(request.user):
            self.message_user(request, "Only admins can reject submissions.", messages.ERROR)
            return
        for submission in queryset:
            submission.reject(request.user, f"Rejected by {request.user} on {timezone.now():%Y-%m-%d}")


class AdCampaignInline(admin.TabularInline):
    model = AdCampaign
    extra = 0
    fields = ["name", "advertiser", "status", "start_date", "end_date", "budget", "is_approved"]
    readonly_fields = fields
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(AdSpace)
class AdSpaceAdmin(admin.ModelAdmin):
    list_display = [
        "name",
        "location",
        "size",
        "is_premium",
        "price_per_day",
        "is_active",
        "impression_count",
        "click_count",
        "ctr",
    ]
    list_filter = ["location", "size", "is_premium", "is_active"]
    search_fields = ["name", "description"]
    readonly_fields = ["impression_count", "click_count", "created_at", "updated_at"]
    inlines = [AdCampaignInline]


@admin.register(AdCampaign)
class AdCampaignAdmin(admin.ModelAdmin):
    form = AdCampaignForm
    list_display = [
        "name",
        "ad_space",
        "advertiser",
        "status",
        "start_date",
        "end_date",
        "budget",
        "spent",
        "ctr",
        "is_approved",
    ]
    list_filter = ["status", "is_approved", "ad_space"]
    search_fields = ["name", "advertiser__email", "ad_link"]
    date_hierarchy = "start_date"
    readonly_fields = ["impression_count", "click_count", "approved_at", "approved_by", "created_at", "updated_at"]
    actions = ["approve_campaigns", "pause_campaigns", "resume_campaigns"]

    @admin.action(description="Approve selected campaigns")
    def approve_campaigns(self, request, queryset):
        if not is_admin(request.user):
            self.message_user(request, "Only admins can approve campaigns.", messages.ERROR)
            return
        for campaign in queryset.filter(is_approved=False):
            campaign.approve(request.user)

    @admin.action(description="Pause selected campaigns")
    def pause_campaigns(self, request, queryset):
        for campaign in queryset.filter(status=AdCampaign.Status.ACTIVE):
            campaign.pause()

    @admin.action(description="Resume selected campaigns")
    def resume_campaigns(self, request, queryset):
        for campaign in queryset.filter(status=AdCampaign.Status.PAUSED, is_approved=True):
            campaign.resume()


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ["created_at", "action", "auditable_type", "auditable_id", "user", "ip_address"]
    list_filter = ["action", "auditable_type", "created_at"]
    search_fields = ["auditable_id", "user__email", "ip_address"]
    readonly_fields = [field.name for field in AuditLog._meta.fields]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
