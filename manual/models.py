"""
Manual Models

Content for the manual / help center site (categories, articles, news,
site-wide settings) and the append-only analytics event tables.

Article.content and SiteSetting.value hold an encoded block document (see
manual.codec); older rows may hold plain text.
"""
import uuid
from django.db import models
from django.utils.text import slugify


class Category(models.Model):
    """
    Grouping for manual articles.
    Examples: 基本設定, アカウント管理, データ連携
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(
        max_length=100,
        unique=True,
        help_text="Category name (e.g., '基本設定')"
    )

    slug = models.SlugField(
        max_length=100,
        unique=True,
        db_index=True,
        allow_unicode=True,
        help_text="URL-friendly identifier"
    )

    description = models.TextField(
        blank=True,
        help_text="Brief description of what this category covers"
    )

    display_order = models.IntegerField(
        default=0,
        help_text="Order in which categories appear (lower = first)"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'manual_category'
        ordering = ['display_order', 'name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name, allow_unicode=True) or uuid.uuid4().hex[:8]
        super().save(*args, **kwargs)


class Article(models.Model):
    """
    A manual article. The body is a block document.
    Public readers only ever see published articles.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(
        max_length=255,
        help_text="Article title"
    )

    excerpt = models.TextField(
        blank=True,
        help_text="Short summary shown on article cards"
    )

    content = models.TextField(
        blank=True,
        default='',
        help_text="Encoded block document (legacy rows: plain text)"
    )

    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='articles',
        help_text="Category this article belongs to"
    )

    author = models.CharField(
        max_length=100,
        default='管理者',
    )

    published = models.BooleanField(default=False, db_index=True)
    featured = models.BooleanField(default=False)

    thumbnail_url = models.URLField(
        max_length=500,
        blank=True,
        help_text="Card thumbnail image"
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'manual_article'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['published', 'created_at'], name='manual_art_pub_created_idx'),
            models.Index(fields=['category', 'published'], name='manual_art_cat_pub_idx'),
        ]

    def __str__(self):
        return self.title


class News(models.Model):
    """Short announcements shown on the home page. May point at an article."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    title = models.CharField(max_length=255)
    content = models.TextField(blank=True)
    published = models.BooleanField(default=False, db_index=True)

    article = models.ForeignKey(
        Article,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='news',
        help_text="Article opened when the news item is clicked"
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'manual_news'
        ordering = ['-created_at']
        verbose_name_plural = 'News'

    def __str__(self):
        return self.title


class SiteSetting(models.Model):
    """Key/value settings. Legal pages are stored here as block documents."""

    class Key(models.TextChoices):
        PRIVACY_POLICY = 'privacy_policy', 'Privacy Policy'
        TERMS_OF_SERVICE = 'terms_of_service', 'Terms of Service'

    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'manual_site_setting'
        ordering = ['key']

    def __str__(self):
        return self.key


# =============================================================================
# ANALYTICS EVENTS (append-only)
# =============================================================================

class PageView(models.Model):
    path = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'manual_page_view'
        ordering = ['-created_at']


class ArticleView(models.Model):
    # Plain value, not a FK: views of deleted articles stay countable
    article_id = models.UUIDField(db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'manual_article_view'
        ordering = ['-created_at']


class LinkClick(models.Model):
    link_url = models.URLField(max_length=2000)
    block_id = models.CharField(max_length=64, blank=True, null=True)
    article_id = models.UUIDField(blank=True, null=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'manual_link_click'
        ordering = ['-created_at']
