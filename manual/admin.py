"""
Manual Django Admin Configuration
"""
from django.contrib import admin

from .models import Article, ArticleView, Category, LinkClick, News, PageView, SiteSetting


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'slug', 'display_order', 'updated_at']
    search_fields = ['name', 'description']
    prepopulated_fields = {'slug': ('name',)}
    ordering = ['display_order', 'name']


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'published', 'featured', 'author', 'created_at']
    list_filter = ['published', 'featured', 'category', 'created_at']
    search_fields = ['title', 'excerpt', 'content']
    readonly_fields = ['id', 'created_at', 'updated_at']

    fieldsets = (
        ('Article Information', {
            'fields': ('id', 'title', 'excerpt', 'category', 'author', 'thumbnail_url')
        }),
        ('Content', {
            'fields': ('content',),
            'description': 'Block document (JSON). Use the block editor API for structured edits.'
        }),
        ('Publishing', {
            'fields': ('published', 'featured')
        }),
        ('Audit', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(News)
class NewsAdmin(admin.ModelAdmin):
    list_display = ['title', 'published', 'article', 'created_at']
    list_filter = ['published', 'created_at']
    search_fields = ['title', 'content']
    raw_id_fields = ['article']


@admin.register(SiteSetting)
class SiteSettingAdmin(admin.ModelAdmin):
    list_display = ['key', 'updated_at']
    readonly_fields = ['updated_at']


class EventAdmin(admin.ModelAdmin):
    """Analytics events are append-only."""
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(PageView)
class PageViewAdmin(EventAdmin):
    list_display = ['path', 'created_at']
    search_fields = ['path']


@admin.register(ArticleView)
class ArticleViewAdmin(EventAdmin):
    list_display = ['article_id', 'created_at']


@admin.register(LinkClick)
class LinkClickAdmin(EventAdmin):
    list_display = ['link_url', 'block_id', 'article_id', 'created_at']
    search_fields = ['link_url']
