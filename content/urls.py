from django.urls import path

from . import views

app_name = "content"

urlpatterns = [
    # Public, resolved by slug
    path("articles/<slug:slug>/", views.ArticleDetailView.as_view(), name="article_detail"),
    path("categories/<slug:slug>/", views.CategoryDetailView.as_view(), name="category_detail"),
    path("events/<slug:slug>/", views.EventDetailView.as_view(), name="event_detail"),
    path("airdrops/<slug:slug>/", views.AirdropDetailView.as_view(), name="airdrop_detail"),
    path("presales/<slug:slug>/", views.PresaleDetailView.as_view(), name="presale_detail"),
    path("videos/<slug:slug>/", views.VideoDetailView.as_view(), name="video_detail"),
    path("memes/<slug:slug>/", views.MemeDetailView.as_view(), name="meme_detail"),
    path(
        "exchange-listings/<slug:slug>/",
        views.ExchangeListingDetailView.as_view(),
        name="listing_detail",
    ),
    # Submissions
    path("submissions/", views.SubmissionListCreateView.as_view(), name="submission_list"),
    path("submissions/<slug:slug>/", views.SubmissionDetailView.as_view(), name="submission_detail"),
    path(
        "submissions/<slug:slug>/approve/",
        views.SubmissionReviewView.as_view(action="approve"),
        name="submission_approve",
    ),
    path(
        "submissions/<slug:slug>/reject/",
        views.SubmissionReviewView.as_view(action="reject"),
        name="submission_reject",
    ),
    # Advertising
    path("ads/<slug:slug>/", views.AdSpaceDetailView.as_view(), name="ad_space_detail"),
    path(
        "ads/campaigns/<int:pk>/impression/",
        views.AdCampaignTrackView.as_view(event="impression"),
        name="ad_impression",
    ),
    path(
        "ads/campaigns/<int:pk>/click/",
        views.AdCampaignTrackView.as_view(event="click"),
        name="ad_click",
    ),
    # Search
    path("search/", views.SearchView.as_view(), name="search"),
    # Account / staff
    path("settings/profile/", views.ProfileUpdateView.as_view(), name="profile"),
    path("dashboard/stats/", views.DashboardStatsView.as_view(), name="dashboard_stats"),
]
