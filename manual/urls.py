"""
Manual Public URLs

Reader-facing endpoints and analytics capture.
Public access - no authentication required.
"""
from django.urls import path

from . import views

urlpatterns = [
    path('home/', views.HomeView.as_view(), name='manual-home'),

    # Articles
    path('articles/', views.ArticleListView.as_view(), name='manual-article-list'),
    path('articles/<uuid:article_id>/', views.ArticleDetailView.as_view(), name='manual-article-detail'),

    path('categories/', views.CategoryListView.as_view(), name='manual-category-list'),
    path('news/', views.NewsListView.as_view(), name='manual-news-list'),

    # Legal pages
    path('privacy-policy/', views.PrivacyPolicyView.as_view(), name='manual-privacy-policy'),
    path('terms-of-service/', views.TermsOfServiceView.as_view(), name='manual-terms-of-service'),

    # Tracking
    path('track/page-view/', views.PageViewTrackView.as_view(), name='manual-track-page-view'),
    path('track/click/', views.LinkClickRedirectView.as_view(), name='manual-track-click'),
]
