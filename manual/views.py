"""
Manual Public Views

Reader-facing endpoints of the manual site.
Public access - no authentication required. Only published articles and
news are ever returned.
"""
import logging
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponseRedirect
from django.urls import reverse
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import SiteSetting
from .renderer import render_blocks
from .serializers import (
    ArticleListSerializer,
    CategorySerializer,
    LinkClickSerializer,
    NewsSerializer,
    PageViewSerializer,
)
from .store import ARTICLES, NEWS, ContentStore
from .tracking import track_article_view, track_link_click, track_page_view

logger = logging.getLogger(__name__)

HOME_NEWS_LIMIT = 5


class StoreMixin:
    """Gives a view its ContentStore. Override ``store_using`` to switch databases."""
    store_class = ContentStore
    store_using = 'default'

    def get_store(self):
        return self.store_class(using=self.store_using)


def tracked_link_builder(request):
    """
    Link builder for the renderer that routes every outbound link through
    the click-tracking redirect.
    """
    endpoint = request.build_absolute_uri(reverse('manual-track-click'))

    def build(url, block_id=None, article_id=None):
        params = {'url': url}
        if block_id:
            params['block'] = block_id
        if article_id:
            params['article'] = str(article_id)
        return f"{endpoint}?{urlencode(params)}"

    return build


class ArticlePagination(PageNumberPagination):
    page_size = settings.MANUAL_ARTICLES_PAGE_SIZE


class HomeView(StoreMixin, APIView):
    """
    GET /api/public/manual/home/

    Home page data: categories with published article counts, the latest
    published news and the featured articles.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        store = self.get_store()
        categories = store.categories_with_counts()
        news = store.list(NEWS, public=True)[:HOME_NEWS_LIMIT]
        featured = store.list(ARTICLES, public=True, featured=True)

        return Response({
            'categories': CategorySerializer(categories, many=True).data,
            'news': NewsSerializer(news, many=True).data,
            'featured_articles': ArticleListSerializer(featured, many=True).data,
        })


class ArticleListView(StoreMixin, generics.ListAPIView):
    """
    GET /api/public/manual/articles/

    Published articles, newest first.

    Query Parameters:
    - search: matches title, excerpt or body
    - category: category id or slug
    - page: page number (12 articles per page)
    """
    permission_classes = [AllowAny]
    serializer_class = ArticleListSerializer
    pagination_class = ArticlePagination
    filter_backends = []

    def get_queryset(self):
        return self.get_store().list(
            ARTICLES,
            public=True,
            search=self.request.query_params.get('search', '').strip() or None,
            category=self.request.query_params.get('category') or None,
        )


class ArticleDetailView(StoreMixin, APIView):
    """
    GET /api/public/manual/articles/{id}/

    One published article with its blocks and rendered HTML.
    Records an article view. Unpublished or missing articles return 404.
    """
    permission_classes = [AllowAny]

    def get(self, request, article_id):
        store = self.get_store()
        article = store.load(ARTICLES, article_id, public=True)
        track_article_view(article.pk, using=store.using)

        blocks = store.load_blocks(article)
        data = ArticleListSerializer(article).data
        data.update({
            'category': store.category_of(article),
            'blocks': [block.dump() for block in blocks],
            'html': render_blocks(
                blocks,
                article_id=article.pk,
                link_builder=tracked_link_builder(request),
            ),
        })
        return Response(data)


class CategoryListView(StoreMixin, generics.ListAPIView):
    """
    GET /api/public/manual/categories/

    All categories with published article counts.
    """
    permission_classes = [AllowAny]
    serializer_class = CategorySerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        return self.get_store().categories_with_counts()


class NewsListView(StoreMixin, generics.ListAPIView):
    """
    GET /api/public/manual/news/

    Published news, newest first.
    """
    permission_classes = [AllowAny]
    serializer_class = NewsSerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        return self.get_store().list(NEWS, public=True)


class LegalPageView(StoreMixin, APIView):
    """Block document stored in a site setting, with its rendered HTML."""
    permission_classes = [AllowAny]
    setting_key = None
    default_notice = ''

    def get(self, request):
        store = self.get_store()
        blocks = store.load_setting_blocks(self.setting_key, default=self.default_notice)
        return Response({
            'key': self.setting_key,
            'blocks': [block.dump() for block in blocks],
            'html': render_blocks(blocks, link_builder=tracked_link_builder(request)),
        })


class PrivacyPolicyView(LegalPageView):
    """
    GET /api/public/manual/privacy-policy/
    """
    setting_key = SiteSetting.Key.PRIVACY_POLICY
    default_notice = 'プライバシーポリシーが設定されていません。'


class TermsOfServiceView(LegalPageView):
    """
    GET /api/public/manual/terms-of-service/
    """
    setting_key = SiteSetting.Key.TERMS_OF_SERVICE
    default_notice = '利用規約が設定されていません。'


# =============================================================================
# TRACKING
# =============================================================================

class PageViewTrackView(StoreMixin, APIView):
    """
    POST /api/public/manual/track/page-view/

    Request Body:
    {
        "path": "/article/<id>"
    }

    Always answers 204; tracking failures are logged, never reported.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PageViewSerializer(data=request.data)
        if serializer.is_valid():
            track_page_view(serializer.validated_data.get('path') or '/', using=self.store_using)
        else:
            logger.debug("Ignoring invalid page view payload: %s", serializer.errors)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LinkClickRedirectView(StoreMixin, APIView):
    """
    GET /api/public/manual/track/click/?url=<target>&block=<block id>&article=<article id>

    Records a link click and redirects to the target. Only http(s) targets
    are followed.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        serializer = LinkClickSerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response({
                'error': 'Invalid link',
                'code': 'INVALID_LINK',
                'details': serializer.errors,
            }, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        track_link_click(
            data['url'],
            block_id=data.get('block') or None,
            article_id=data.get('article'),
            using=self.store_using,
        )
        return HttpResponseRedirect(data['url'])
