from django.contrib.auth import get_user_model
from django.contrib.contenttypes.models import ContentType
from django.test import TestCase
from django.urls import reverse

from content.models import Article, AuditLog, Submission
from content.services.audit_service import get_request_context

User = get_user_model()


def logs_for(model, action=None):
    queryset = AuditLog.objects.filter(auditable_type=ContentType.objects.get_for_model(model))
    if action:
        queryset = queryset.filter(action=action)
    return queryset.order_by("pk")


class AuditLogTest(TestCase):
    def test_create_is_recorded(self):
        article = Article.objects.create(title="Launch Day")
        entry = logs_for(Article, AuditLog.Action.CREATED).get()
        self.assertEqual(entry.auditable_id, str(article.pk))
        self.assertEqual(entry.auditable, article)
        self.assertEqual(entry.new_values["title"], "Launch Day")
        self.assertEqual(entry.new_values["slug"], "launch-day")
        self.assertEqual(entry.old_values, {})
        self.assertIsNone(entry.user)

    def test_update_records_changed_fields_only(self):
        article = Article.objects.create(title="Launch Day")
        article.title = "Launch Week"
        article.save()

        entry = logs_for(Article, AuditLog.Action.UPDATED).get()
        self.assertEqual(entry.old_values["title"], "Launch Day")
        self.assertEqual(entry.new_values["title"], "Launch Week")
        self.assertEqual(entry.old_values["slug"], "launch-day")
        self.assertEqual(entry.new_values["slug"], "launch-week")
        self.assertNotIn("content", entry.new_values)

    def test_unchanged_save_is_not_recorded(self):
        user = User.objects.create_user(username="quiet", email="quiet@example.com", password="pw")
        user.save()
        self.assertFalse(logs_for(User, AuditLog.Action.UPDATED).exists())

    def test_password_is_never_stored(self):
        user = User.objects.create_user(username="secret", email="secret@example.com", password="pw")
        user.set_password("new-password")
        user.save()
        created = logs_for(User, AuditLog.Action.CREATED).get()
        self.assertNotIn("password", created.new_values)
        self.assertEqual(created.new_values["username"], "secret")
        self.assertFalse(logs_for(User, AuditLog.Action.UPDATED).exists())

    def test_refreshed_instance_with_no_local_change_is_not_recorded(self):
        article = Article.objects.create(title="Launch Day")
        Article.objects.filter(pk=article.pk).update(excerpt="changed elsewhere")
        article.refresh_from_db()
        article.save(update_fields=["excerpt"])
        self.assertEqual(logs_for(Article).count(), 1)
        self.assertFalse(logs_for(Article, AuditLog.Action.UPDATED).exists())

    def test_update_diffs_against_stored_row(self):
        article = Article.objects.create(title="Launch Day")
        Article.objects.filter(pk=article.pk).update(excerpt="changed elsewhere")
        article.excerpt = "written here"
        article.save(update_fields=["excerpt"])
        entry = logs_for(Article, AuditLog.Action.UPDATED).get()
        self.assertEqual(entry.old_values, {"excerpt": "changed elsewhere"})
        self.assertEqual(entry.new_values, {"excerpt": "written here"})

    def test_update_fields_by_attname(self):
        user = User.objects.create_user(username="editor", email="editor@example.com", password="pw")
        article = Article.objects.create(title="Launch Day")
        article.author_id = user.pk
        article.save(update_fields=["author_id"])
        entry = logs_for(Article, AuditLog.Action.UPDATED).get()
        self.assertEqual(entry.old_values, {"author_id": None})
        self.assertEqual(entry.new_values, {"author_id": user.pk})

    def test_delete_is_recorded(self):
        article = Article.objects.create(title="Short Lived")
        pk = article.pk
        article.delete()
        entry = logs_for(Article, AuditLog.Action.DELETED).get()
        self.assertEqual(entry.auditable_id, str(pk))
        self.assertEqual(entry.old_values["title"], "Short Lived")


class AuditRequestContextTest(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            username="writer", email="writer@example.com", password="testpass123"
        )
        self.client.force_login(self.user)

    def test_request_details_are_attached(self):
        self.client.post(
            reverse("content:submission_list"),
            {"title": "Audited Submission", "type": "event"},
            HTTP_USER_AGENT="audit-test-agent",
            HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1",
        )
        submission = Submission.objects.get(slug="audited-submission")
        entry = logs_for(Submission, AuditLog.Action.CREATED).get(auditable_id=str(submission.pk))
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.ip_address, "203.0.113.7")
        self.assertEqual(entry.user_agent, "audit-test-agent")

    def test_remote_addr_fallback(self):
        self.client.post(reverse("content:submission_list"), {"title": "Direct", "type": "event"})
        entry = logs_for(Submission, AuditLog.Action.CREATED).get()
        self.assertEqual(entry.ip_address, "127.0.0.1")
        self.assertEqual(entry.user_agent, "")

    def test_context_is_cleared_after_request(self):
        self.client.get(reverse("content:profile"))
        self.assertEqual(
            get_request_context(), {"user_id": None, "ip_address": None, "user_agent": ""}
        )
