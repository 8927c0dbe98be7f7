"""
Content Store

The one place that talks to the database for manual content. Views build a
ContentStore (optionally pointed at another database alias) and go through
it for every read and write, so public/admin filtering and the block
document encoding live here instead of in each view.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.db.models import Count, Q

from .codec import decode_blocks, encode_blocks
from .exceptions import BackendFailure, ContentNotFound
from .models import Article, ArticleView, Category, LinkClick, News, PageView, SiteSetting

logger = logging.getLogger(__name__)

ARTICLES = 'articles'
CATEGORIES = 'categories'
NEWS = 'news'
SITE_SETTINGS = 'site_settings'

MODELS = {
    ARTICLES: Article,
    CATEGORIES: Category,
    NEWS: News,
    SITE_SETTINGS: SiteSetting,
}

# Kinds that have a ``published`` flag the public surface must respect
PUBLISHABLE = {ARTICLES, NEWS}

UNCATEGORIZED_KEY = 'uncategorized'
UNCATEGORIZED_LABEL = 'カテゴリ未設定'


class ContentStore:
    """
    Load/save/list manual entities.

    Args:
        using: database alias to read from and write to
    """

    def __init__(self, using='default'):
        self.using = using

    def queryset(self, kind, public=False):
        try:
            model = MODELS[kind]
        except KeyError:
            raise ValueError(f"Unknown entity kind: {kind}")

        queryset = model.objects.using(self.using).all()
        if public and kind in PUBLISHABLE:
            queryset = queryset.filter(published=True)
        if kind == ARTICLES:
            queryset = queryset.select_related('category')
        elif kind == NEWS:
            queryset = queryset.select_related('article')
        return queryset

    def load(self, kind, key, public=False):
        """
        Fetch one entity by primary key (site settings: by ``key``).

        Raises ContentNotFound when it does not exist or, for public reads,
        is not published.
        """
        lookup = {'key': key} if kind == SITE_SETTINGS else {'pk': key}
        try:
            return self.queryset(kind, public=public).get(**lookup)
        except (ObjectDoesNotExist, DjangoValidationError, ValueError):
            raise ContentNotFound(f"{kind} {key} not found")

    def list(self, kind, public=False, search=None, category=None, **filters) -> List:
        queryset = self.queryset(kind, public=public).filter(**filters)

        if kind == ARTICLES:
            if search:
                queryset = queryset.filter(
                    Q(title__icontains=search) |
                    Q(excerpt__icontains=search) |
                    Q(content__icontains=search)
                )
            if category:
                queryset = queryset.filter(self._category_filter(category))
            return list(queryset.order_by('-created_at'))

        if kind == CATEGORIES:
            return list(queryset.order_by('display_order', 'name'))

        if kind == NEWS:
            return list(queryset.order_by('-created_at'))

        return list(queryset)

    @staticmethod
    def _category_filter(category):
        try:
            return Q(category_id=uuid.UUID(str(category)))
        except ValueError:
            return Q(category__slug=category)

    def save(self, entity):
        """Persist ``entity``. Failures are logged and raised as BackendFailure."""
        try:
            entity.save(using=self.using)
        except DatabaseError as e:
            logger.exception("Failed to save %s %s: %s", type(entity).__name__, entity.pk, e)
            raise BackendFailure() from e
        return entity

    def delete(self, kind, key):
        entity = self.load(kind, key)
        try:
            entity.delete(using=self.using)
        except DatabaseError as e:
            logger.exception("Failed to delete %s %s: %s", kind, key, e)
            raise BackendFailure() from e

    # -------------------------------------------------------------------------
    # Block documents
    # -------------------------------------------------------------------------

    def load_blocks(self, article):
        return decode_blocks(article.content)

    def save_article_blocks(self, article, blocks):
        article.content = encode_blocks(blocks)
        return self.save(article)

    def load_setting(self, key) -> Optional[str]:
        """Raw value of a site setting, or None when it was never saved."""
        try:
            return self.load(SITE_SETTINGS, key).value
        except ContentNotFound:
            return None

    def load_setting_blocks(self, key, default=None):
        value = self.load_setting(key)
        if value is None:
            value = default
        if value is None:
            return []
        return decode_blocks(value)

    def save_setting(self, key, value):
        """Upsert a site setting by key."""
        try:
            setting, _ = SiteSetting.objects.using(self.using).update_or_create(
                key=key,
                defaults={'value': value},
            )
        except DatabaseError as e:
            logger.exception("Failed to save site setting %s: %s", key, e)
            raise BackendFailure() from e
        return setting

    def save_setting_blocks(self, key, blocks):
        return self.save_setting(key, encode_blocks(blocks))

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def category_of(article) -> Dict[str, Any]:
        """Category key/name for display and grouping; sentinel when unset."""
        if article.category_id is None or article.category is None:
            return {'key': UNCATEGORIZED_KEY, 'name': UNCATEGORIZED_LABEL, 'slug': None}
        return {
            'key': str(article.category_id),
            'name': article.category.name,
            'slug': article.category.slug,
        }

    def categories_with_counts(self):
        """Categories with the number of published articles in each."""
        return list(
            self.queryset(CATEGORIES)
            .annotate(article_count=Count('articles', filter=Q(articles__published=True)))
            .order_by('display_order', 'name')
        )

    def fetch_analytics(self) -> Dict[str, Any]:
        """
        Raw rows for the analytics report, plus the article and category
        lookups needed to label them. Newest events first.
        """
        db = self.using
        return {
            'page_views': list(PageView.objects.using(db).order_by('-created_at').values('path')),
            'article_views': [
                {'article_id': str(row['article_id'])}
                for row in ArticleView.objects.using(db).order_by('-created_at').values('article_id')
            ],
            'link_clicks': [
                {
                    'link_url': row['link_url'],
                    'block_id': row['block_id'],
                    'article_id': str(row['article_id']) if row['article_id'] else None,
                }
                for row in LinkClick.objects.using(db).order_by('-created_at').values(
                    'link_url', 'block_id', 'article_id'
                )
            ],
            'articles': {
                str(row['id']): {
                    'title': row['title'],
                    'category_id': str(row['category_id']) if row['category_id'] else None,
                }
                for row in Article.objects.using(db).values('id', 'title', 'category_id')
            },
            'categories': [
                {'id': str(row['id']), 'name': row['name']}
                for row in Category.objects.using(db).order_by('display_order', 'name').values('id', 'name')
            ],
        }
