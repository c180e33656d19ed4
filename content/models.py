import re
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.urls import reverse
from django.utils import timezone
from django_countries.fields import CountryField

User = settings.AUTH_USER_MODEL

YOUTUBE_ID_PATTERNS = [
    re.compile(r"youtube\.com/watch\?v=([^&?/]+)"),
    re.compile(r"youtube\.com/embed/([^&?/]+)"),
    re.compile(r"youtube\.com/v/([^&?/]+)"),
    re.compile(r"youtu\.be/([^&?/]+)"),
]


def slug_field():
    return models.SlugField(max_length=255, unique=True, blank=True)


class UserProfile(models.Model):
    """Public profile and role flags for a site user."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="profile")
    display_name = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    bio = models.TextField(max_length=500, blank=True)
    website = models.URLField(max_length=255, blank=True)
    twitter = models.CharField(max_length=255, blank=True)
    telegram = models.CharField(max_length=255, blank=True)
    discord = models.CharField(max_length=255, blank=True)
    facebook = models.CharField(max_length=255, blank=True)
    instagram = models.CharField(max_length=255, blank=True)
    birthday = models.DateField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    is_admin = models.BooleanField(default=False)
    is_influencer = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.user}"


class Category(models.Model):
    """Hierarchical content categories."""

    name = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        "self", on_delete=models.SET_NULL, null=True, blank=True, related_name="children"
    )
    order = models.PositiveIntegerField(default=0)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    article_count = models.PositiveIntegerField(default=0)
    view_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ["order", "name"]

    def __str__(self):
        return self.name

    def get_absolute_url(self):
        return reverse("content:category_detail", kwargs={"slug": self.slug})

    def get_full_path(self) -> str:
        path = [self.name]
        parent = self.parent
        while parent:
            path.insert(0, parent.name)
            parent = parent.parent
        return " > ".join(path)


class Tag(models.Model):
    name = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    usage_count = models.PositiveIntegerField(default=0)
    trending_score = models.IntegerField(default=0)
    last_used_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name

    def increment_usage_count(self):
        self.usage_count += 1
        self.last_used_at = timezone.now()
        self.save(update_fields=["usage_count", "last_used_at"])


class ArticleQuerySet(models.QuerySet):
    def published(self):
        return self.filter(
            status__in=[Article.Status.PUBLISHED, Article.Status.FEATURED],
            published_at__isnull=False,
            published_at__lte=timezone.now(),
        )

    def featured(self):
        return self.filter(models.Q(is_featured=True) | models.Q(status=Article.Status.FEATURED))

    def breaking_news(self):
        return self.filter(is_breaking_news=True)

    def trending(self):
        return self.filter(is_trending=True)

    def by_content_type(self, content_type):
        return self.filter(content_type=content_type)


class Article(models.Model):
    """News, blog posts and the other editorial content types."""

    class Type(models.TextChoices):
        NEWS = "news", "News"
        SHORT_NEWS = "short_news", "Short news"
        BLOG = "blog", "Blog"
        PRESS_RELEASE = "press_release", "Press release"
        SPONSORED = "sponsored", "Sponsored"
        PRICE_PREDICTION = "price_prediction", "Price prediction"
        GUEST_POST = "guest_post", "Guest post"
        RESEARCH_REPORT = "research_report", "Research report"
        WEB3_BULLETIN = "web3_bulletin", "Web3 bulletin"
        WEB_STORY = "web_story", "Web story"

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        FEATURED = "featured", "Featured"
        ARCHIVED = "archived", "Archived"

    title = models.CharField(max_length=255)
    slug = slug_field()
    content = models.TextField(blank=True)
    excerpt = models.TextField(blank=True)
    content_type = models.CharField(
        max_length=30, choices=Type.choices, default=Type.NEWS
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    is_breaking_news = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    is_trending = models.BooleanField(default=False)
    is_time_sensitive = models.BooleanField(default=False)
    view_count = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="articles"
    )
    tags = models.ManyToManyField(Tag, related_name="articles", blank=True)
    author = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="articles"
    )
    author_bio = models.TextField(blank=True)
    source = models.CharField(max_length=255, blank=True)
    story_slides = models.JSONField(default=list, blank=True)
    slides_count = models.PositiveIntegerField(default=0)
    meta_title = models.CharField(max_length=255, blank=True)
    meta_description = models.TextField(blank=True)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ArticleQuerySet.as_manager()

    class Meta:
        ordering = ["-published_at", "-created_at"]
        indexes = [
            models.Index(fields=["status", "-published_at"], name="article_status_published_idx"),
            models.Index(fields=["content_type", "status"], name="article_type_status_idx"),
        ]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if self.content_type == Article.Type.WEB_STORY and isinstance(self.story_slides, list):
            self.slides_count = len(self.story_slides)
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("content:article_detail", kwargs={"slug": self.slug})

    def increment_view_count(self):
        Article.objects.filter(pk=self.pk).update(view_count=models.F("view_count") + 1)
        self.view_count += 1

    def publish(self):
        self.status = Article.Status.PUBLISHED
        self.published_at = timezone.now()
        self.save(update_fields=["status", "published_at", "updated_at"])

    def unpublish(self):
        self.status = Article.Status.DRAFT
        self.published_at = None
        self.save(update_fields=["status", "published_at", "updated_at"])


class Comment(models.Model):
    article = models.ForeignKey(Article, on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="comments")
    body = models.TextField()
    is_approved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"Comment by {self.user} on {self.article}"


class Event(models.Model):
    class Status(models.TextChoices):
        UPCOMING = "upcoming", "Upcoming"
        ONGOING = "ongoing", "Ongoing"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    title = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    type = models.CharField(max_length=50, blank=True, help_text="Conference, meetup, AMA...")
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    location = models.CharField(max_length=255, blank=True)
    country = CountryField(blank=True)
    is_virtual = models.BooleanField(default=False)
    virtual_link = models.URLField(blank=True)
    registration_link = models.URLField(blank=True)
    max_participants = models.PositiveIntegerField(null=True, blank=True)
    current_participants = models.PositiveIntegerField(default=0)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.UPCOMING)
    organizer = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="events"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_date"]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse("content:event_detail", kwargs={"slug": self.slug})

    def is_full(self) -> bool:
        return self.max_participants is not None and self.current_participants >= self.max_participants

    def register_participant(self) -> bool:
        if self.is_full():
            return False
        self.current_participants += 1
        self.save(update_fields=["current_participants", "updated_at"])
        return True


class TokenCampaign(models.Model):
    """Fields shared by airdrops and presales."""

    class Status(models.TextChoices):
        POTENTIAL = "potential", "Potential"
        UPCOMING = "upcoming", "Upcoming"
        ONGOING = "ongoing", "Ongoing"
        ENDED = "ended", "Ended"

    name = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    token_symbol = models.CharField(max_length=20, blank=True)
    blockchain = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.UPCOMING)
    start_date = models.DateTimeField(null=True, blank=True)
    end_date = models.DateTimeField(null=True, blank=True)
    website_url = models.URLField(blank=True)
    is_featured = models.BooleanField(default=False)
    view_count = models.PositiveIntegerField(default=0)
    created_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.token_symbol})" if self.token_symbol else self.name

    @property
    def time_remaining(self) -> str:
        if not self.end_date:
            return "Ongoing"
        now = timezone.now()
        if self.end_date <= now:
            return "Ended"
        diff = self.end_date - now
        if diff.days > 0:
            return f"{diff.days} days"
        hours = diff.seconds // 3600
        if hours > 0:
            return f"{hours} hours"
        return f"{diff.seconds // 60} minutes"


class Airdrop(TokenCampaign):
    type = models.CharField(max_length=50, blank=True)
    airdrop_qty = models.DecimalField(max_digits=30, decimal_places=0, null=True, blank=True)
    winners_count = models.PositiveIntegerField(default=0)
    usd_value = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)

    def get_absolute_url(self):
        return reverse("content:airdrop_detail", kwargs={"slug": self.slug})


class Presale(TokenCampaign):
    stage = models.CharField(max_length=50, blank=True)
    launchpad = models.CharField(max_length=100, blank=True)
    token_price = models.DecimalField(max_digits=20, decimal_places=8, null=True, blank=True)
    token_price_currency = models.CharField(max_length=10, default="USD")
    soft_cap = models.DecimalField(max_digits=20, decimal_places=2, null=True, blank=True)
    hard_cap = models.DecimalField(max_digits=20, decimal_places=2, null=True, blank=True)

    def get_absolute_url(self):
        return reverse("content:presale_detail", kwargs={"slug": self.slug})


class CryptocurrencyVideo(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    title = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    youtube_url = models.URLField()
    duration = models.CharField(max_length=20, blank=True)
    view_count = models.PositiveIntegerField(default=0)
    upvotes_count = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="videos"
    )
    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="videos"
    )
    is_featured = models.BooleanField(default=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    published_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-published_at", "-created_at"]

    def __str__(self):
        return self.title

    def save(self, *args, **kwargs):
        if self.status == self.Status.PUBLISHED and not self.published_at:
            self.published_at = timezone.now()
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("content:video_detail", kwargs={"slug": self.slug})

    @property
    def youtube_id(self):
        if not self.youtube_url:
            return None
        for pattern in YOUTUBE_ID_PATTERNS:
            match = pattern.search(self.youtube_url)
            if match:
                return match.group(1)
        return None

    @property
    def youtube_embed_url(self):
        video_id = self.youtube_id
        return f"https://www.youtube.com/embed/{video_id}" if video_id else None


class CryptocurrencyMeme(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"

    title = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    image_url = models.URLField(blank=True)
    upvotes_count = models.PositiveIntegerField(default=0)
    category = models.ForeignKey(
        Category, on_delete=models.SET_NULL, null=True, blank=True, related_name="memes"
    )
    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="memes"
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return reverse("content:meme_detail", kwargs={"slug": self.slug})


class CryptoExchangeListing(models.Model):
    name = models.CharField(max_length=255)
    slug = slug_field()
    exchange = models.CharField(max_length=100)
    token_symbol = models.CharField(max_length=20, blank=True)
    description = models.TextField(blank=True)
    listing_date = models.DateTimeField(null=True, blank=True)
    trading_pairs = models.JSONField(default=list, blank=True)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-listing_date", "-created_at"]

    def __str__(self):
        return f"{self.name} on {self.exchange}"

    def get_absolute_url(self):
        return reverse("content:listing_detail", kwargs={"slug": self.slug})


class Submission(models.Model):
    """User-submitted content awaiting editorial review."""

    class Type(models.TextChoices):
        AIRDROP = "airdrop", "Airdrop"
        PRESALE = "presale", "Presale"
        EVENT = "event", "Event"
        GUEST_POST = "guest_post", "Guest post"
        PRESS_RELEASE = "press_release", "Press release"
        SPONSORED = "sponsored", "Sponsored content"

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        REVIEWING = "reviewing", "Reviewing"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"

    title = models.CharField(max_length=255)
    slug = slug_field()
    type = models.CharField(max_length=20, choices=Type.choices)
    content = models.TextField(blank=True)
    description = models.TextField(blank=True)
    token_symbol = models.CharField(max_length=20, blank=True)
    website_url = models.URLField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    feedback = models.TextField(blank=True)
    submitted_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name="submissions")
    reviewed_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="reviewed_submissions"
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["status", "-created_at"], name="submission_status_created_idx")]

    def __str__(self):
        return f"{self.title} ({self.get_status_display()})"

    def start_review(self):
        self.status = Submission.Status.REVIEWING
        self.save(update_fields=["status", "updated_at"])

    def approve(self, reviewer, feedback: str = ""):
        self._review(Submission.Status.APPROVED, reviewer, feedback)

    def reject(self, reviewer, feedback: str):
        self._review(Submission.Status.REJECTED, reviewer, feedback)

    def _review(self, status, reviewer, feedback):
        self.status = status
        self.feedback = feedback or ""
        self.reviewed_by = reviewer
        self.reviewed_at = timezone.now()
        self.save(update_fields=["status", "feedback", "reviewed_by", "reviewed_at", "updated_at"])

    @property
    def is_pending(self) -> bool:
        return self.status == Submission.Status.PENDING


class AuditLog(models.Model):
    """Record of create/update/delete operations on audited models."""

    class Action(models.TextChoices):
        CREATED = "created", "Created"
        UPDATED = "updated", "Updated"
        DELETED = "deleted", "Deleted"

    user = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="audit_logs"
    )
    action = models.CharField(max_length=20, choices=Action.choices)
    auditable_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    auditable_id = models.CharField(max_length=64)
    auditable = GenericForeignKey("auditable_type", "auditable_id")
    old_values = models.JSONField(default=dict, blank=True)
    new_values = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [models.Index(fields=["auditable_type", "auditable_id"], name="auditlog_target_idx")]

    def __str__(self):
        return f"{self.action} {self.auditable_type.model}#{self.auditable_id}"


class AdSpaceQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def premium(self):
        return self.filter(is_premium=True)

    def by_location(self, location):
        return self.filter(location=location)

    def by_size(self, size):
        return self.filter(size=size)


class AdSpace(models.Model):
    """A placement on the site that campaigns are booked into."""

    class Location(models.TextChoices):
        HOMEPAGE_TOP = "homepage_top", "Homepage top"
        HOMEPAGE_SIDE = "homepage_side", "Homepage side"
        HOMEPAGE_INLINE = "homepage_inline", "Homepage inline"
        POST_TOP = "post_top", "Post top"
        POST_MID = "post_mid", "Post middle"
        POST_BOTTOM = "post_bottom", "Post bottom"
        PARTNER_ZONE = "partner_zone", "Partner zone"

    class Size(models.TextChoices):
        BANNER_728X90 = "banner_728x90", "728x90"
        BANNER_300X250 = "banner_300x250", "300x250"
        BANNER_160X600 = "banner_160x600", "160x600"
        BANNER_320X100 = "banner_320x100", "320x100"
        BANNER_468X60 = "banner_468x60", "468x60"

    name = models.CharField(max_length=255)
    slug = slug_field()
    description = models.TextField(blank=True)
    location = models.CharField(max_length=30, choices=Location.choices)
    size = models.CharField(max_length=30, choices=Size.choices)
    is_premium = models.BooleanField(default=False)
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    priority = models.IntegerField(default=0)
    target_pages = models.JSONField(default=list, blank=True)
    target_categories = models.JSONField(default=list, blank=True)
    target_tags = models.JSONField(default=list, blank=True)
    impression_count = models.PositiveIntegerField(default=0)
    click_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AdSpaceQuerySet.as_manager()

    class Meta:
        ordering = ["-priority", "name"]
        indexes = [models.Index(fields=["location", "is_active"], name="adspace_location_active_idx")]

    def __str__(self):
        return f"{self.name} ({self.get_location_display()})"

    def get_absolute_url(self):
        return reverse("content:ad_space_detail", kwargs={"slug": self.slug})

    def increment_impression_count(self):
        AdSpace.objects.filter(pk=self.pk).update(impression_count=models.F("impression_count") + 1)
        self.impression_count += 1

    def increment_click_count(self):
        AdSpace.objects.filter(pk=self.pk).update(click_count=models.F("click_count") + 1)
        self.click_count += 1

    @property
    def ctr(self) -> float:
        if not self.impression_count:
            return 0
        return round(self.click_count / self.impression_count * 100, 2)

    @property
    def current_price(self) -> Decimal:
        if self.is_premium and self.price_per_day is not None:
            return self.price_per_day
        return Decimal("0")

    def active_campaigns(self):
        return self.campaigns.active()

    def should_show_on_page(self, page: str) -> bool:
        return not self.target_pages or page in self.target_pages

    def should_show_in_category(self, category) -> bool:
        return not self.target_categories or category.pk in self.target_categories

    def should_show_with_tag(self, tag) -> bool:
        return not self.target_tags or tag.pk in self.target_tags


class AdCampaignQuerySet(models.QuerySet):
    def pending(self):
        return self.filter(status=AdCampaign.Status.PENDING)

    def active(self):
        now = timezone.now()
        return self.filter(status=AdCampaign.Status.ACTIVE, start_date__lte=now, end_date__gte=now)

    def paused(self):
        return self.filter(status=AdCampaign.Status.PAUSED)

    def completed(self):
        return self.filter(
            models.Q(status=AdCampaign.Status.COMPLETED) | models.Q(end_date__lt=timezone.now())
        )

    def cancelled(self):
        return self.filter(status=AdCampaign.Status.CANCELLED)

    def approved(self):
        return self.filter(is_approved=True)


class AdCampaign(models.Model):
    """
    An advertiser's booking of an ad space for a date range.

    Campaigns start out pending. Approval activates a pending campaign; an
    active one can be paused and resumed, and finishes as completed or
    cancelled. A campaign whose end date has passed counts as completed
    whatever its stored status.
    """

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        ACTIVE = "active", "Active"
        PAUSED = "paused", "Paused"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    name = models.CharField(max_length=255)
    ad_space = models.ForeignKey(AdSpace, on_delete=models.PROTECT, related_name="campaigns")
    advertiser = models.ForeignKey(User, on_delete=models.CASCADE, related_name="ad_campaigns")
    ad_content = models.TextField()
    ad_image = models.URLField(max_length=255, blank=True)
    ad_link = models.URLField(max_length=255)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    budget = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal("0"))]
    )
    spent = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    targeting_rules = models.JSONField(default=dict, blank=True)
    impression_count = models.PositiveIntegerField(default=0)
    click_count = models.PositiveIntegerField(default=0)
    ctr = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    is_approved = models.BooleanField(default=False)
    approved_at = models.DateTimeField(null=True, blank=True)
    approved_by = models.ForeignKey(
        User, on_delete=models.SET_NULL, null=True, blank=True, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AdCampaignQuerySet.as_manager()

    class Meta:
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["status", "start_date", "end_date"], name="adcampaign_status_dates_idx")
        ]

    def __str__(self):
        return self.name

    def increment_impression_count(self):
        AdCampaign.objects.filter(pk=self.pk).update(impression_count=models.F("impression_count") + 1)
        self.ad_space.increment_impression_count()

    def increment_click_count(self):
        AdCampaign.objects.filter(pk=self.pk).update(click_count=models.F("click_count") + 1)
        self.ad_space.increment_click_count()
        self.update_ctr()

    def update_ctr(self):
        self.refresh_from_db(fields=["impression_count", "click_count"])
        if not self.impression_count:
            return
        ratio = Decimal(self.click_count) / Decimal(self.impression_count) * 100
        self.ctr = min(ratio, Decimal("100")).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        self.save(update_fields=["ctr", "updated_at"])

    def approve(self, approver):
        self.is_approved = True
        self.approved_at = timezone.now()
        self.approved_by = approver
        if self.status == AdCampaign.Status.PENDING:
            self.status = AdCampaign.Status.ACTIVE
        self.save(update_fields=["is_approved", "approved_at", "approved_by", "status", "updated_at"])

    def pause(self):
        self._set_status(AdCampaign.Status.PAUSED)

    def resume(self):
        self._set_status(AdCampaign.Status.ACTIVE)

    def complete(self):
        self._set_status(AdCampaign.Status.COMPLETED)

    def cancel(self):
        self._set_status(AdCampaign.Status.CANCELLED)

    def _set_status(self, status):
        self.status = status
        self.save(update_fields=["status", "updated_at"])

    @property
    def is_pending(self) -> bool:
        return self.status == AdCampaign.Status.PENDING

    @property
    def is_active(self) -> bool:
        now = timezone.now()
        return self.status == AdCampaign.Status.ACTIVE and self.start_date <= now <= self.end_date

    @property
    def is_paused(self) -> bool:
        return self.status == AdCampaign.Status.PAUSED

    @property
    def is_completed(self) -> bool:
        return self.status == AdCampaign.Status.COMPLETED or self.end_date < timezone.now()

    @property
    def is_cancelled(self) -> bool:
        return self.status == AdCampaign.Status.CANCELLED

    @property
    def remaining_budget(self) -> Decimal:
        return max(Decimal("0"), self.budget - self.spent)

    @property
    def status_text(self) -> str:
        for label, check in (
            ("Pending", self.is_pending),
            ("Active", self.is_active),
            ("Paused", self.is_paused),
            ("Completed", self.is_completed),
            ("Cancelled", self.is_cancelled),
        ):
            if check:
                return label
        return "Unknown"
