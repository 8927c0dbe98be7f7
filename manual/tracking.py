"""
Analytics capture.

One insert per event. Tracking must never break the page that triggered
it, so database errors are logged and swallowed.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError

from .models import ArticleView, LinkClick, PageView

logger = logging.getLogger(__name__)


def track_page_view(path, using='default'):
    try:
        return PageView.objects.using(using).create(path=(path or '/')[:500])
    except (DatabaseError, ValidationError) as e:
        logger.warning("Failed to record page view for %s: %s", path, e)
        return None


def track_article_view(article_id, using='default'):
    try:
        return ArticleView.objects.using(using).create(article_id=article_id)
    except (DatabaseError, ValidationError) as e:
        logger.warning("Failed to record article view for %s: %s", article_id, e)
        return None


def track_link_click(link_url, block_id=None, article_id=None, using='default'):
    try:
        return LinkClick.objects.using(using).create(
            link_url=link_url,
            block_id=block_id or None,
            article_id=article_id or None,
        )
    except (DatabaseError, ValidationError) as e:
        logger.warning("Failed to record link click for %s: %s", link_url, e)
        return None
