from .models import Submission, UserProfile


def is_admin(user) -> bool:
    if not user or not user.is_authenticated:
        return False
    if user.is_superuser:
        return True
    try:
        return user.profile.is_admin
    except UserProfile.DoesNotExist:
        return False


class SubmissionPolicy:
    """Who may do what with a submission."""

    @staticmethod
    def view_any(user) -> bool:
        return user.is_authenticated

    @staticmethod
    def view(user, submission: Submission) -> bool:
        return user.pk == submission.submitted_by_id or is_admin(user)

    @staticmethod
    def create(user) -> bool:
        return user.is_authenticated

    @staticmethod
    def update(user, submission: Submission) -> bool:
        return user.pk == submission.submitted_by_id

    @staticmethod
    def delete(user, submission: Submission) -> bool:
        return user.pk == submission.submitted_by_id or is_admin(user)

    @staticmethod
    def approve(user, submission: Submission) -> bool:
        return is_admin(user)

    @staticmethod
    def reject(user, submission: Submission) -> bool:
        return is_admin(user)
