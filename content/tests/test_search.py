from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone

from content.models import Airdrop, Article, Category, Event
from content.services.search_service import SearchService


class SearchServiceTest(TestCase):
    def setUp(self):
        self.article = Article.objects.create(
            title="Bitcoin Halving Explained",
            excerpt="What the halving means for miners.",
            status=Article.Status.PUBLISHED,
            published_at=timezone.now() - timedelta(hours=1),
        )
        Article.objects.create(title="Bitcoin Draft", status=Article.Status.DRAFT)
        self.airdrop = Airdrop.objects.create(
            name="Layer Two Drop", description="<p>Claim tokens if you bridged <b>Bitcoin</b> early.</p>"
        )
        self.event = Event.objects.create(title="Solana Summit", start_date=timezone.now())
        self.category = Category.objects.create(name="Bitcoin", description="All things BTC")

    def test_empty_query(self):
        self.assertEqual(SearchService.search(""), [])
        self.assertEqual(SearchService.search("   "), [])

    def test_searches_every_type(self):
        results = SearchService.search("bitcoin")
        self.assertEqual(
            {(r["type"], r["title"]) for r in results},
            {
                ("articles", "Bitcoin Halving Explained"),
                ("airdrops", "Layer Two Drop"),
                ("categories", "Bitcoin"),
            },
        )

    def test_results_are_newest_first(self):
        created = [r["created_at"] for r in SearchService.search("bitcoin")]
        self.assertEqual(created, sorted(created, reverse=True))

    def test_single_type(self):
        results = SearchService.search("solana", "events")
        self.assertEqual(len(results), 1)
        self.assertEqual(results[0]["url"], self.event.get_absolute_url())
        self.assertEqual(SearchService.search("solana", "articles"), [])

    def test_unknown_type(self):
        self.assertEqual(SearchService.search("bitcoin", "nfts"), [])

    def test_excerpts(self):
        results = {r["type"]: r for r in SearchService.search("bitcoin")}
        self.assertEqual(results["articles"]["excerpt"], "What the halving means for miners.")
        self.assertEqual(results["airdrops"]["excerpt"], "Claim tokens if you bridged Bitcoin early.")
        self.assertEqual(results["categories"]["excerpt"], "All things BTC")

    def test_long_descriptions_are_truncated(self):
        Airdrop.objects.create(name="Wordy Drop", description="word " * 100)
        excerpt = SearchService.search("wordy", "airdrops")[0]["excerpt"]
        self.assertLessEqual(len(excerpt), 150)
        self.assertTrue(excerpt.endswith("…"))

    def test_results_are_capped_per_type(self):
        for number in range(12):
            Category.objects.create(name=f"Altcoin {number}")
        self.assertEqual(len(SearchService.search("altcoin", "categories")), 10)


class SearchViewTest(TestCase):
    def test_empty_query_returns_no_results(self):
        response = self.client.get(reverse("content:search"))
        self.assertEqual(response.json(), {"results": []})

    def test_query_is_echoed(self):
        Category.objects.create(name="Ethereum")
        response = self.client.get(reverse("content:search"), {"query": "ether", "type": "categories"})
        data = response.json()
        self.assertEqual(data["query"], "ether")
        self.assertEqual([r["url"] for r in data["results"]], ["/categories/ethereum/"])
