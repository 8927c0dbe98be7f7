"""
Manual Analytics Service

Builds the admin analytics report from raw event rows that were already
fetched (see ContentStore.fetch_analytics). Nothing here touches the
database; the report is recomputed from the rows on every request.

Rankings:
- pages:    page views grouped by path (admin paths excluded), top 10
- articles: article views grouped by article, filterable by category,
            paginated 20 per page
- links:    link clicks grouped by URL, shown by host, top 10

All rankings sort by count descending; ties keep the order in which the
key was first seen in the raw rows.
"""
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import unquote, urlsplit

from .store import UNCATEGORIZED_KEY, UNCATEGORIZED_LABEL

logger = logging.getLogger(__name__)

ADMIN_PREFIX = '/admin'

ALL_CATEGORIES = 'all'

STATIC_PAGE_KEY = 'static'
STATIC_PAGE_LABEL = '固定ページ'

STATIC_PAGE_NAMES = {
    '/': 'TOPページ',
    '/privacy-policy': 'プライバシーポリシー',
    '/terms-of-service': '利用規約',
}

UNKNOWN_ARTICLE_TITLE = '不明な記事'

ARTICLE_PATH = re.compile(r'^/article/(.+)$')

TOP_LIMIT = 10
ARTICLES_PER_PAGE = 20

CATEGORY_PALETTE = [
    '#0088FE', '#00C49F', '#FFBB28', '#FF8042',
    '#8884D8', '#82CA9D', '#FF6B9D', '#A4DE6C',
]

# Reserved colors, never part of the palette
STATIC_PAGE_COLOR = '#94A3B8'
UNCATEGORIZED_COLOR = '#CBD5E1'


def _rank(counts: Dict[str, int]):
    # sorted() is stable, so equal counts keep first-seen order
    return sorted(counts.items(), key=lambda item: -item[1])


def _count(keys: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for key in keys:
        counts[key] = counts.get(key, 0) + 1
    return counts


def assign_category_colors(categories: Iterable) -> Dict[str, str]:
    """
    Map each category key to a chart color.

    Real categories take palette slots in first-seen order; the static page
    and uncategorized keys always get their reserved colors. The palette
    wraps, so once there are more real categories than palette entries two
    categories can share a color (never a reserved one).
    """
    colors = {
        STATIC_PAGE_KEY: STATIC_PAGE_COLOR,
        UNCATEGORIZED_KEY: UNCATEGORIZED_COLOR,
    }
    slot = 0
    for category in categories:
        key = str(category['id']) if isinstance(category, Mapping) else str(category)
        if key in colors:
            continue
        colors[key] = CATEGORY_PALETTE[slot % len(CATEGORY_PALETTE)]
        slot += 1
    return colors


def _category_for(article: Optional[Mapping], category_names: Mapping[str, str]):
    category_id = article.get('category_id') if article else None
    if category_id and category_id in category_names:
        return category_id, category_names[category_id]
    return UNCATEGORIZED_KEY, UNCATEGORIZED_LABEL


def resolve_page(path: str, articles: Mapping[str, Mapping], category_names: Mapping[str, str]):
    """Display name and category of a tracked path."""
    if path in STATIC_PAGE_NAMES:
        return STATIC_PAGE_NAMES[path], STATIC_PAGE_KEY, STATIC_PAGE_LABEL

    match = ARTICLE_PATH.match(path)
    if match:
        article_id = unquote(match.group(1))
        article = articles.get(article_id)
        category_key, category_name = _category_for(article, category_names)
        if article and article.get('title'):
            return article['title'], category_key, category_name
        return f"記事: {article_id}", category_key, category_name

    return path, STATIC_PAGE_KEY, STATIC_PAGE_LABEL


def rank_pages(page_views, articles, categories, limit=TOP_LIMIT) -> List[Dict[str, Any]]:
    category_names = {str(c['id']): c['name'] for c in categories}
    counts = _count(
        path for path in ((row.get('path') or '/') for row in page_views)
        if not path.startswith(ADMIN_PREFIX)
    )

    stats = []
    for path, count in _rank(counts)[:limit]:
        display_name, category_key, category_name = resolve_page(path, articles, category_names)
        stats.append({
            'path': path,
            'count': count,
            'display_name': display_name,
            'category_key': category_key,
            'category_name': category_name,
        })
    return stats


def rank_articles(article_views, articles, categories) -> List[Dict[str, Any]]:
    category_names = {str(c['id']): c['name'] for c in categories}
    counts = _count(
        str(row['article_id']) for row in article_views if row.get('article_id')
    )

    stats = []
    for article_id, count in _rank(counts):
        article = articles.get(article_id)
        category_key, category_name = _category_for(article, category_names)
        stats.append({
            'id': article_id,
            'title': (article or {}).get('title') or UNKNOWN_ARTICLE_TITLE,
            'count': count,
            'category_key': category_key,
            'category_name': category_name,
        })
    return stats


def category_options(article_stats) -> List[Dict[str, str]]:
    """Categories present in the article ranking, sorted by label."""
    options = {}
    for stat in article_stats:
        options[stat['category_key']] = stat['category_name']
    return sorted(
        ({'value': key, 'label': label} for key, label in options.items()),
        key=lambda option: option['label'],
    )


def filter_by_category(article_stats, category=ALL_CATEGORIES):
    if not category or category == ALL_CATEGORIES:
        return list(article_stats)
    return [stat for stat in article_stats if stat['category_key'] == category]


def paginate(items, page=1, per_page=ARTICLES_PER_PAGE) -> Dict[str, Any]:
    """Slice ``items``; ``page`` is clamped into the valid range."""
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page))
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    page = min(max(1, page), total_pages)

    start = (page - 1) * per_page
    return {
        'items': items[start:start + per_page],
        'page': page,
        'per_page': per_page,
        'total': total,
        'total_pages': total_pages,
    }


def link_host(url: str) -> str:
    """Host name of ``url`` without credentials or port."""
    try:
        return urlsplit(url).hostname or url
    except ValueError:
        return url


def rank_links(link_clicks, limit=TOP_LIMIT) -> List[Dict[str, Any]]:
    counts = _count(row['link_url'] for row in link_clicks if row.get('link_url'))
    return [
        {'url': url, 'host': link_host(url), 'count': count}
        for url, count in _rank(counts)[:limit]
    ]


def build_report(raw: Mapping[str, Any], category=ALL_CATEGORIES, page=1,
                 per_page=ARTICLES_PER_PAGE) -> Dict[str, Any]:
    """
    Full analytics payload for the admin dashboard.

    Args:
        raw: rows as returned by ContentStore.fetch_analytics()
        category: category key to filter the article ranking by, or 'all'
        page: requested page of the article ranking (clamped)
    """
    articles = raw.get('articles', {})
    categories = raw.get('categories', [])
    colors = assign_category_colors(categories)

    def colored(stats):
        return [{**stat, 'color': colors.get(stat['category_key'], UNCATEGORIZED_COLOR)} for stat in stats]

    page_views = [row for row in raw.get('page_views', []) if not (row.get('path') or '/').startswith(ADMIN_PREFIX)]
    article_stats = rank_articles(raw.get('article_views', []), articles, categories)
    filtered = filter_by_category(article_stats, category)
    article_page = paginate(colored(filtered), page=page, per_page=per_page)

    logger.debug(
        "Analytics report: %d page views, %d article views, %d link clicks",
        len(page_views), len(raw.get('article_views', [])), len(raw.get('link_clicks', [])),
    )

    return {
        'totals': {
            'page_views': len(page_views),
            'article_views': len(raw.get('article_views', [])),
            'link_clicks': len(raw.get('link_clicks', [])),
        },
        'pages': colored(rank_pages(page_views, articles, categories)),
        'articles': {
            'selected_category': category or ALL_CATEGORIES,
            'category_options': category_options(article_stats),
            **article_page,
        },
        'links': rank_links(raw.get('link_clicks', [])),
        'category_colors': colors,
    }
