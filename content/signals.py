from django.contrib.auth import get_user_model
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from content.models import (
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
    Tag,
    UserProfile,
)
from content.services.audit_service import register_audited
from content.services.slug_service import register_sluggable

User = get_user_model()

SLUG_SOURCE_FIELDS = {
    Category: "name",
    Tag: "name",
    Airdrop: "name",
    Presale: "name",
    CryptoExchangeListing: ("name", "token_symbol"),
    Article: "title",
    Event: "title",
    CryptocurrencyVideo: "title",
    CryptocurrencyMeme: "title",
    Submission: "title",
    AdSpace: "name",
}

for model, source_field in SLUG_SOURCE_FIELDS.items():
    register_sluggable(model, source_field=source_field)

for model in (User, Article, Submission):
    register_audited(model)


@receiver(post_save, sender=User)
def create_profile_for_new_user(sender, instance, created, raw=False, **kwargs):
    if created and not raw:
        UserProfile.objects.get_or_create(user=instance)


@receiver(pre_save, sender=Article)
def fill_author_bio(sender, instance, raw=False, **kwargs):
    """Copy the author's profile bio onto articles that have none."""
    if raw or instance.author_bio or not instance.author_id:
        return
    profile = UserProfile.objects.filter(user_id=instance.author_id).first()
    if profile and profile.bio:
        instance.author_bio = profile.bio
