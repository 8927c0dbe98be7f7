"""
Manual Admin URLs

Management endpoints for the manual site.
Only accessible by staff users.
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import admin_views

router = DefaultRouter()
router.register('articles', admin_views.ArticleAdminViewSet, basename='manual-article-admin')
router.register('categories', admin_views.CategoryAdminViewSet, basename='manual-category-admin')
router.register('news', admin_views.NewsAdminViewSet, basename='manual-news-admin')

urlpatterns = [
    # Block documents (before the router so they are not shadowed)
    path('articles/<uuid:id>/blocks/', admin_views.ArticleBlocksView.as_view(), name='manual-article-blocks'),
    path(
        'articles/<uuid:id>/blocks/<str:block_id>/upload/',
        admin_views.BlockUploadView.as_view(),
        name='manual-block-upload',
    ),

    # Legal pages
    path('settings/<str:key>/', admin_views.SiteSettingView.as_view(), name='manual-setting'),
    path('settings/<str:key>/blocks/', admin_views.SettingBlocksView.as_view(), name='manual-setting-blocks'),

    path('uploads/', admin_views.UploadView.as_view(), name='manual-upload'),
    path('analytics/', admin_views.AnalyticsView.as_view(), name='manual-analytics'),

    # ViewSet routes
    path('', include(router.urls)),
]
