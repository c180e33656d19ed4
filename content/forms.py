from django import forms
from django.contrib.auth import get_user_model

from .models import AdCampaign, Submission, UserProfile

User = get_user_model()

PROFILE_FIELDS = [
    "phone",
    "bio",
    "website",
    "twitter",
    "telegram",
    "discord",
    "facebook",
    "instagram",
    "birthday",
    "location",
]


class ProfileUpdateForm(forms.Form):
    name = forms.CharField(max_length=255)
    email = forms.EmailField(max_length=255)
    phone = forms.CharField(max_length=20, required=False)
    bio = forms.CharField(max_length=500, required=False, widget=forms.Textarea)
    website = forms.URLField(max_length=255, required=False)
    twitter = forms.CharField(max_length=255, required=False)
    telegram = forms.CharField(max_length=255, required=False)
    discord = forms.CharField(max_length=255, required=False)
    facebook = forms.CharField(max_length=255, required=False)
    instagram = forms.CharField(max_length=255, required=False)
    birthday = forms.DateField(required=False)
    location = forms.CharField(max_length=255, required=False)

    def __init__(self, *args, user, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_email(self):
        email = self.cleaned_data["email"]
        if User.objects.filter(email__iexact=email).exclude(pk=self.user.pk).exists():
            raise forms.ValidationError("This email address is already in use.")
        return email

    def save(self):
        data = self.cleaned_data
        self.user.email = data["email"]
        self.user.save(update_fields=["email"])

        profile, _ = UserProfile.objects.get_or_create(user=self.user)
        profile.display_name = data["name"]
        for field in PROFILE_FIELDS:
            setattr(profile, field, data.get(field))
        profile.save()
        return profile


class SubmissionForm(forms.ModelForm):
    class Meta:
        model = Submission
        fields = ["title", "type", "content", "description", "token_symbol", "website_url"]
        widgets = {
            "content": forms.Textarea(attrs={"rows": 8}),
            "description": forms.Textarea(attrs={"rows": 4}),
        }


class SubmissionReviewForm(forms.Form):
    feedback = forms.CharField(required=False, widget=forms.Textarea)


class AdCampaignForm(forms.ModelForm):
    class Meta:
        model = AdCampaign
        fields = [
            "name",
            "ad_space",
            "advertiser",
            "ad_content",
            "ad_image",
            "ad_link",
            "start_date",
            "end_date",
            "status",
            "budget",
            "spent",
            "ctr",
            "targeting_rules",
            "is_approved",
        ]
        widgets = {"ad_content": forms.Textarea(attrs={"rows": 4})}
        error_messages = {
            "name": {
                "required": "The campaign name is required.",
                "max_length": "The campaign name must not exceed 255 characters.",
            },
            "ad_space": {
                "required": "Please select an ad space.",
                "invalid_choice": "The selected ad space does not exist.",
            },
            "advertiser": {
                "required": "Please select an advertiser.",
                "invalid_choice": "The selected advertiser does not exist.",
            },
            "ad_content": {"required": "The ad content is required."},
            "ad_image": {"invalid": "Please enter a valid image URL."},
            "ad_link": {
                "required": "The ad link is required.",
                "invalid": "Please enter a valid URL.",
                "max_length": "The URL must not exceed 255 characters.",
            },
            "start_date": {
                "required": "Please select a start date.",
                "invalid": "Please enter a valid start date.",
            },
            "end_date": {
                "required": "Please select an end date.",
                "invalid": "Please enter a valid end date.",
            },
            "status": {
                "required": "Please select a status.",
                "invalid_choice": "The selected status is invalid.",
            },
            "budget": {
                "required": "Please enter a budget.",
                "invalid": "The budget must be a number.",
                "min_value": "The budget must be at least 0.",
            },
            "spent": {
                "invalid": "The spent amount must be a number.",
                "min_value": "The spent amount must be at least 0.",
            },
            "ctr": {
                "invalid": "The CTR must be a number.",
                "min_value": "The CTR must be at least 0.",
                "max_value": "The CTR must not exceed 100.",
            },
        }

    def clean_targeting_rules(self):
        rules = self.cleaned_data.get("targeting_rules")
        if rules in (None, ""):
            return {}
        if not isinstance(rules, dict):
            raise forms.ValidationError("The targeting rules must be a JSON object.")
        return rules

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get("start_date")
        end_date = cleaned_data.get("end_date")
        if start_date and end_date and end_date <= start_date:
            self.add_error("end_date", "The end date must be after the start date.")
        return cleaned_data
