from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from content.models import Submission, UserProfile
from content.policies import SubmissionPolicy, is_admin

User = get_user_model()


def make_user(username, admin=False):
    user = User.objects.create_user(username=username, email=f"{username}@example.com", password="testpass123")
    if admin:
        UserProfile.objects.filter(user=user).update(is_admin=True)
        user = User.objects.get(pk=user.pk)
    return user


class SubmissionPolicyTest(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.other = make_user("other")
        self.admin = make_user("editor", admin=True)
        self.submission = Submission.objects.create(
            title="Token Presale", type=Submission.Type.PRESALE, submitted_by=self.owner
        )

    def test_profile_created_for_new_users(self):
        self.assertTrue(UserProfile.objects.filter(user=self.owner).exists())

    def test_is_admin(self):
        self.assertTrue(is_admin(self.admin))
        self.assertFalse(is_admin(self.owner))
        superuser = User.objects.create_superuser(username="root", email="root@example.com", password="pw")
        self.assertTrue(is_admin(superuser))

    def test_owner_permissions(self):
        self.assertTrue(SubmissionPolicy.view(self.owner, self.submission))
        self.assertTrue(SubmissionPolicy.update(self.owner, self.submission))
        self.assertTrue(SubmissionPolicy.delete(self.owner, self.submission))
        self.assertFalse(SubmissionPolicy.approve(self.owner, self.submission))
        self.assertFalse(SubmissionPolicy.reject(self.owner, self.submission))

    def test_other_user_permissions(self):
        self.assertTrue(SubmissionPolicy.view_any(self.other))
        self.assertTrue(SubmissionPolicy.create(self.other))
        self.assertFalse(SubmissionPolicy.view(self.other, self.submission))
        self.assertFalse(SubmissionPolicy.update(self.other, self.submission))
        self.assertFalse(SubmissionPolicy.delete(self.other, self.submission))

    def test_admin_permissions(self):
        self.assertTrue(SubmissionPolicy.view(self.admin, self.submission))
        self.assertFalse(SubmissionPolicy.update(self.admin, self.submission))
        self.assertTrue(SubmissionPolicy.delete(self.admin, self.submission))
        self.assertTrue(SubmissionPolicy.approve(self.admin, self.submission))
        self.assertTrue(SubmissionPolicy.reject(self.admin, self.submission))


class SubmissionWorkflowTest(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.admin = make_user("editor", admin=True)

    def create_submission(self, title="Moon Token Airdrop"):
        return Submission.objects.create(
            title=title, type=Submission.Type.AIRDROP, submitted_by=self.owner
        )

    def test_create_requires_login(self):
        response = self.client.post(reverse("content:submission_list"), {"title": "Anything"})
        self.assertEqual(response.status_code, 302)
        self.assertFalse(Submission.objects.exists())

    def test_create_derives_slug(self):
        self.client.force_login(self.owner)
        payload = {"title": "Moon Token Airdrop", "type": "airdrop", "content": "Details"}
        first = self.client.post(reverse("content:submission_list"), payload)
        second = self.client.post(reverse("content:submission_list"), payload)

        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json(), {"slug": "moon-token-airdrop", "status": "pending"})
        self.assertEqual(second.json()["slug"], "moon-token-airdrop-1")
        self.assertEqual(Submission.objects.filter(submitted_by=self.owner).count(), 2)

    def test_create_validates_input(self):
        self.client.force_login(self.owner)
        response = self.client.post(reverse("content:submission_list"), {"title": "", "type": "bogus"})
        self.assertEqual(response.status_code, 400)
        errors = response.json()["errors"]
        self.assertIn("title", errors)
        self.assertIn("type", errors)

    def test_non_admin_cannot_approve(self):
        submission = self.create_submission()
        self.client.force_login(self.owner)
        response = self.client.post(reverse("content:submission_approve", args=[submission.slug]))
        self.assertEqual(response.status_code, 403)
        submission.refresh_from_db()
        self.assertTrue(submission.is_pending)

    def test_admin_approves(self):
        submission = self.create_submission()
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse("content:submission_approve", args=[submission.slug]), {"feedback": "Looks good"}
        )
        self.assertEqual(response.status_code, 200)
        submission.refresh_from_db()
        self.assertEqual(submission.status, Submission.Status.APPROVED)
        self.assertEqual(submission.reviewed_by, self.admin)
        self.assertEqual(submission.feedback, "Looks good")
        self.assertIsNotNone(submission.reviewed_at)

    def test_reject_requires_feedback(self):
        submission = self.create_submission()
        self.client.force_login(self.admin)
        response = self.client.post(reverse("content:submission_reject", args=[submission.slug]))
        self.assertEqual(response.status_code, 400)
        submission.refresh_from_db()
        self.assertTrue(submission.is_pending)

    def test_admin_rejects_with_feedback(self):
        submission = self.create_submission()
        self.client.force_login(self.admin)
        response = self.client.post(
            reverse("content:submission_reject", args=[submission.slug]), {"feedback": "Missing audit"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "rejected")
        submission.refresh_from_db()
        self.assertEqual(submission.feedback, "Missing audit")

    def test_review_keeps_slug(self):
        submission = self.create_submission()
        submission.start_review()
        submission.approve(self.admin)
        submission.refresh_from_db()
        self.assertEqual(submission.slug, "moon-token-airdrop")
        self.assertEqual(submission.status, Submission.Status.APPROVED)

    def test_unknown_slug_returns_404(self):
        self.client.force_login(self.admin)
        response = self.client.post(reverse("content:submission_approve", args=["missing"]))
        self.assertEqual(response.status_code, 404)


class SubmissionAccessTest(TestCase):
    def setUp(self):
        self.owner = make_user("owner")
        self.other = make_user("other")
        self.admin = make_user("editor", admin=True)
        self.submission = Submission.objects.create(
            title="Moon Token Airdrop", type=Submission.Type.AIRDROP, submitted_by=self.owner
        )
        Submission.objects.create(title="Other Event", type=Submission.Type.EVENT, submitted_by=self.other)

    def detail_url(self, slug="moon-token-airdrop"):
        return reverse("content:submission_detail", kwargs={"slug": slug})

    def test_list_requires_login(self):
        response = self.client.get(reverse("content:submission_list"))
        self.assertEqual(response.status_code, 302)

    def test_list_shows_own_submissions(self):
        self.client.force_login(self.owner)
        response = self.client.get(reverse("content:submission_list"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([s["slug"] for s in response.json()["results"]], ["moon-token-airdrop"])

    def test_admin_lists_everything(self):
        self.client.force_login(self.admin)
        response = self.client.get(reverse("content:submission_list"))
        self.assertEqual(
            {s["slug"] for s in response.json()["results"]}, {"moon-token-airdrop", "other-event"}
        )

    def test_owner_and_admin_can_view(self):
        for user in (self.owner, self.admin):
            self.client.force_login(user)
            response = self.client.get(self.detail_url())
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["title"], "Moon Token Airdrop")

    def test_other_user_cannot_view(self):
        self.client.force_login(self.other)
        self.assertEqual(self.client.get(self.detail_url()).status_code, 403)

    def test_owner_edit_rederives_slug(self):
        self.client.force_login(self.owner)
        response = self.client.post(
            self.detail_url(), {"title": "Moon Token Airdrop Season 2", "type": "airdrop"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["slug"], "moon-token-airdrop-season-2")
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.slug, "moon-token-airdrop-season-2")
        self.assertEqual(self.client.get(self.detail_url()).status_code, 404)

    def test_admin_cannot_edit(self):
        self.client.force_login(self.admin)
        response = self.client.post(self.detail_url(), {"title": "Hijacked", "type": "airdrop"})
        self.assertEqual(response.status_code, 403)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.title, "Moon Token Airdrop")

    def test_invalid_edit(self):
        self.client.force_login(self.owner)
        response = self.client.post(self.detail_url(), {"title": "", "type": "airdrop"})
        self.assertEqual(response.status_code, 400)
        self.assertIn("title", response.json()["errors"])
