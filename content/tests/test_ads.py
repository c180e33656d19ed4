from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from content.forms import AdCampaignForm
from content.models import AdCampaign, AdSpace, Category

User = get_user_model()


def make_space(name="Homepage Banner", **kwargs):
    kwargs.setdefault("location", AdSpace.Location.HOMEPAGE_TOP)
    kwargs.setdefault("size", AdSpace.Size.BANNER_728X90)
    return AdSpace.objects.create(name=name, **kwargs)


def make_campaign(space, advertiser, **kwargs):
    now = timezone.now()
    kwargs.setdefault("name", "Launch Promo")
    kwargs.setdefault("ad_content", "Buy the dip")
    kwargs.setdefault("ad_link", "https://example.com/promo")
    kwargs.setdefault("start_date", now - timedelta(days=1))
    kwargs.setdefault("end_date", now + timedelta(days=7))
    kwargs.setdefault("budget", Decimal("500.00"))
    return AdCampaign.objects.create(ad_space=space, advertiser=advertiser, **kwargs)


class AdSpaceTest(TestCase):
    def test_slug_derived_from_name(self):
        self.assertEqual(make_space().slug, "homepage-banner")
        self.assertEqual(make_space().slug, "homepage-banner-1")

    def test_scopes(self):
        top = make_space("Top", is_premium=True)
        side = make_space("Side", location=AdSpace.Location.HOMEPAGE_SIDE, size=AdSpace.Size.BANNER_300X250)
        make_space("Retired", is_active=False)

        self.assertEqual(set(AdSpace.objects.active()), {top, side})
        self.assertEqual(list(AdSpace.objects.premium()), [top])
        self.assertEqual(list(AdSpace.objects.by_location(AdSpace.Location.HOMEPAGE_SIDE)), [side])
        self.assertEqual(list(AdSpace.objects.by_size(AdSpace.Size.BANNER_300X250)), [side])

    def test_counters_and_ctr(self):
        space = make_space()
        self.assertEqual(space.ctr, 0)
        for _ in range(4):
            space.increment_impression_count()
        space.increment_click_count()
        space.refresh_from_db()
        self.assertEqual((space.impression_count, space.click_count), (4, 1))
        self.assertEqual(space.ctr, 25.0)

    def test_current_price(self):
        self.assertEqual(make_space("Free", price_per_day=Decimal("9.99")).current_price, Decimal("0"))
        self.assertEqual(
            make_space("Paid", is_premium=True, price_per_day=Decimal("9.99")).current_price,
            Decimal("9.99"),
        )

    def test_targeting(self):
        markets = Category.objects.create(name="Markets")
        defi = Category.objects.create(name="DeFi")
        space = make_space(target_pages=["home"], target_categories=[markets.pk])
        self.assertTrue(space.should_show_on_page("home"))
        self.assertFalse(space.should_show_on_page("post"))
        self.assertTrue(space.should_show_in_category(markets))
        self.assertFalse(space.should_show_in_category(defi))
        self.assertTrue(make_space("Anywhere").should_show_in_category(defi))


class AdCampaignLifecycleTest(TestCase):
    def setUp(self):
        self.advertiser = User.objects.create_user(username="brand", email="brand@example.com", password="pw")
        self.editor = User.objects.create_user(username="editor", email="editor@example.com", password="pw")
        self.space = make_space()
        self.campaign = make_campaign(self.space, self.advertiser)

    def test_starts_pending(self):
        self.assertTrue(self.campaign.is_pending)
        self.assertFalse(self.campaign.is_approved)
        self.assertEqual(self.campaign.status_text, "Pending")
        self.assertEqual(list(AdCampaign.objects.pending()), [self.campaign])

    def test_approve_activates_pending_campaign(self):
        self.campaign.approve(self.editor)
        campaign = AdCampaign.objects.get(pk=self.campaign.pk)
        self.assertTrue(campaign.is_approved)
        self.assertEqual(campaign.approved_by, self.editor)
        self.assertIsNotNone(campaign.approved_at)
        self.assertTrue(campaign.is_active)
        self.assertEqual(list(AdCampaign.objects.active()), [campaign])
        self.assertEqual(list(self.space.active_campaigns()), [campaign])

    def test_pause_resume_complete(self):
        self.campaign.approve(self.editor)
        self.campaign.pause()
        self.assertEqual(AdCampaign.objects.get(pk=self.campaign.pk).status, AdCampaign.Status.PAUSED)
        self.assertFalse(AdCampaign.objects.active().exists())

        self.campaign.resume()
        self.assertTrue(AdCampaign.objects.get(pk=self.campaign.pk).is_active)

        self.campaign.complete()
        self.assertEqual(self.campaign.status_text, "Completed")
        self.assertEqual(list(AdCampaign.objects.completed()), [self.campaign])

    def test_cancel(self):
        self.campaign.cancel()
        self.assertEqual(list(AdCampaign.objects.cancelled()), [self.campaign])
        self.assertEqual(self.campaign.status_text, "Cancelled")

    def test_ended_campaign_counts_as_completed(self):
        now = timezone.now()
        ended = make_campaign(
            self.space,
            self.advertiser,
            name="Old Promo",
            status=AdCampaign.Status.ACTIVE,
            start_date=now - timedelta(days=10),
            end_date=now - timedelta(days=1),
        )
        self.assertTrue(ended.is_completed)
        self.assertFalse(ended.is_active)
        self.assertIn(ended, AdCampaign.objects.completed())

    def test_remaining_budget(self):
        self.campaign.spent = Decimal("120.50")
        self.assertEqual(self.campaign.remaining_budget, Decimal("379.50"))
        self.campaign.spent = Decimal("900")
        self.assertEqual(self.campaign.remaining_budget, Decimal("0"))

    def test_counters_update_ctr_and_space(self):
        for _ in range(3):
            self.campaign.increment_impression_count()
        self.campaign.increment_click_count()

        campaign = AdCampaign.objects.get(pk=self.campaign.pk)
        self.assertEqual((campaign.impression_count, campaign.click_count), (3, 1))
        self.assertEqual(campaign.ctr, Decimal("33.33"))
        self.space.refresh_from_db()
        self.assertEqual((self.space.impression_count, self.space.click_count), (3, 1))

    def test_ctr_without_impressions_stays_zero(self):
        self.campaign.update_ctr()
        self.assertEqual(AdCampaign.objects.get(pk=self.campaign.pk).ctr, Decimal("0"))


class AdCampaignFormTest(TestCase):
    def setUp(self):
        self.advertiser = User.objects.create_user(username="brand", email="brand@example.com", password="pw")
        self.space = make_space()

    def data(self, **overrides):
        data = {
            "name": "Launch Promo",
            "ad_space": self.space.pk,
            "advertiser": self.advertiser.pk,
            "ad_content": "Buy the dip",
            "ad_link": "https://example.com/promo",
            "start_date": "2025-03-01 00:00",
            "end_date": "2025-03-31 00:00",
            "status": "pending",
            "budget": "500",
            "spent": "0",
            "ctr": "0",
        }
        data.update(overrides)
        return data

    def test_valid_campaign(self):
        form = AdCampaignForm(self.data())
        self.assertTrue(form.is_valid(), form.errors)
        campaign = form.save()
        self.assertEqual(campaign.targeting_rules, {})
        self.assertEqual(campaign.status, AdCampaign.Status.PENDING)

    def test_end_date_must_follow_start_date(self):
        form = AdCampaignForm(self.data(end_date="2025-02-01 00:00"))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["end_date"], ["The end date must be after the start date."])

    def test_field_messages(self):
        form = AdCampaignForm(
            self.data(name="", ad_space="", ad_link="not a url", budget="-5", ctr="150", status="bogus")
        )
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["name"], ["The campaign name is required."])
        self.assertEqual(form.errors["ad_space"], ["Please select an ad space."])
        self.assertEqual(form.errors["ad_link"], ["Please enter a valid URL."])
        self.assertEqual(form.errors["status"], ["The selected status is invalid."])

    def test_budget_and_ctr_bounds(self):
        form = AdCampaignForm(self.data(budget="-5", ctr="150"))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors["budget"], ["The budget must be at least 0."])
        self.assertEqual(form.errors["ctr"], ["The CTR must not exceed 100."])

    def test_targeting_rules_must_be_an_object(self):
        form = AdCampaignForm(self.data(targeting_rules="[1, 2]"))
        self.assertFalse(form.is_valid())
        self.assertIn("targeting_rules", form.errors)


class AdViewsTest(TestCase):
    def setUp(self):
        advertiser = User.objects.create_user(username="brand", email="brand@example.com", password="pw")
        editor = User.objects.create_user(username="editor", email="editor@example.com", password="pw")
        self.space = make_space()
        self.live = make_campaign(self.space, advertiser)
        self.live.approve(editor)
        self.pending = make_campaign(self.space, advertiser, name="Waiting")

    def test_space_lists_running_campaigns(self):
        response = self.client.get(reverse("content:ad_space_detail", kwargs={"slug": "homepage-banner"}))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["location"], "homepage_top")
        self.assertEqual([c["name"] for c in data["campaigns"]], ["Launch Promo"])

    def test_inactive_space_is_not_found(self):
        AdSpace.objects.filter(pk=self.space.pk).update(is_active=False)
        response = self.client.get(reverse("content:ad_space_detail", kwargs={"slug": "homepage-banner"}))
        self.assertEqual(response.status_code, 404)

    def test_impression_and_click_tracking(self):
        self.client.post(reverse("content:ad_impression", kwargs={"pk": self.live.pk}))
        self.client.post(reverse("content:ad_impression", kwargs={"pk": self.live.pk}))
        response = self.client.post(reverse("content:ad_click", kwargs={"pk": self.live.pk}))
        self.assertEqual(response.status_code, 200)
        self.live.refresh_from_db()
        self.assertEqual((self.live.impression_count, self.live.click_count), (2, 1))
        self.assertEqual(self.live.ctr, Decimal("50.00"))

    def test_pending_campaign_is_not_tracked(self):
        response = self.client.post(reverse("content:ad_click", kwargs={"pk": self.pending.pk}))
        self.assertEqual(response.status_code, 404)
