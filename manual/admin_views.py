"""
Manual Admin Views

Management endpoints for articles, categories, news, legal pages, block
documents, uploads and analytics.
Only accessible by authenticated staff users.
"""
import logging

from django.conf import settings
from django.db import DatabaseError
from django.db.models import Count, Q
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .analytics import ALL_CATEGORIES, build_report
from .blocks import BaseBlock
from .editor import BlockEditor
from .exceptions import BackendFailure, ContentNotFound
from .models import Category, News, SiteSetting
from .permissions import IsManualAdmin
from .renderer import render_blocks
from .serializers import (
    ArticleAdminSerializer,
    BlockOperationSerializer,
    BlockUploadSerializer,
    CategoryAdminSerializer,
    NewsAdminSerializer,
    SiteSettingSerializer,
    UploadSerializer,
)
from .storage import MediaStorage
from .store import ARTICLES
from .views import StoreMixin

logger = logging.getLogger(__name__)


class StoreBackedViewSet(StoreMixin, viewsets.ModelViewSet):
    """
    ModelViewSet whose writes go to the store's database and surface
    database errors as BackendFailure (503).
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]
    lookup_field = 'id'

    def perform_create(self, serializer):
        self._write(serializer.save)

    def perform_update(self, serializer):
        self._write(serializer.save)

    def perform_destroy(self, instance):
        self._write(lambda: instance.delete(using=self.store_using))

    def _write(self, operation):
        try:
            return operation()
        except DatabaseError as e:
            logger.exception("Failed to write %s: %s", self.basename, e)
            raise BackendFailure() from e


class ArticleAdminViewSet(StoreBackedViewSet):
    """
    Admin CRUD for articles, drafts included.

    Query Parameters:
    - published, featured: true/false
    - category: category id
    - search: title, excerpt or body
    """
    serializer_class = ArticleAdminSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ['published', 'featured', 'category']
    search_fields = ['title', 'excerpt', 'content']

    def get_queryset(self):
        return self.get_store().queryset(ARTICLES).order_by('-created_at')

    def _set_published(self, published):
        article = self.get_object()
        article.published = published
        self.get_store().save(article)
        return article

    @action(detail=True, methods=['post'])
    def publish(self, request, id=None):
        """Publish an article."""
        article = self._set_published(True)
        return Response({
            'message': 'Article published successfully',
            'published': article.published,
        })

    @action(detail=True, methods=['post'])
    def unpublish(self, request, id=None):
        """Unpublish an article (back to draft)."""
        article = self._set_published(False)
        return Response({
            'message': 'Article unpublished',
            'published': article.published,
        })


class CategoryAdminViewSet(StoreBackedViewSet):
    """Admin CRUD for categories."""
    serializer_class = CategoryAdminSerializer
    pagination_class = None
    filter_backends = []

    def get_queryset(self):
        return Category.objects.using(self.store_using).annotate(
            article_count=Count('articles', filter=Q(articles__published=True))
        ).order_by('display_order', 'name')


class NewsAdminViewSet(StoreBackedViewSet):
    """Admin CRUD for news, drafts included."""
    serializer_class = NewsAdminSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ['published']

    def get_queryset(self):
        return News.objects.using(self.store_using).select_related('article').order_by('-created_at')


# =============================================================================
# BLOCK DOCUMENTS
# =============================================================================

def _payload(result):
    if isinstance(result, BaseBlock):
        return result.dump()
    return result


class BlockDocumentView(StoreMixin, APIView):
    """
    GET:  block outline (with previews) and rendered preview HTML
    POST: apply one editor operation and save the document

    Subclasses say where the document lives.
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]

    def load_document(self, store, **kwargs):
        raise NotImplementedError

    def save_document(self, store, document, blocks):
        raise NotImplementedError

    def document_response(self, editor, **extra):
        return Response({
            **extra,
            'blocks': editor.outline(),
            'html': render_blocks(editor.blocks),
        })

    def get(self, request, **kwargs):
        store = self.get_store()
        document, blocks = self.load_document(store, **kwargs)
        return self.document_response(BlockEditor(blocks))

    def post(self, request, **kwargs):
        serializer = BlockOperationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = self.get_store()
        document, blocks = self.load_document(store, **kwargs)
        editor = BlockEditor(blocks)
        result = editor.apply(serializer.validated_data)
        self.save_document(store, document, editor.blocks)

        logger.info("Applied '%s' to %s", serializer.validated_data['op'], document)
        return self.document_response(editor, result=_payload(result))


class ArticleBlocksView(BlockDocumentView):
    """
    GET/POST /api/admin/manual/articles/{id}/blocks/

    Request Body (POST):
    {
        "op": "add" | "update" | "delete" | "duplicate" | "move",
        "id": "block id (all but add)",
        "type": "block type (add)",
        "content": {...} (update),
        "direction": "up" | "down" (move)
    }
    """

    def load_document(self, store, id=None):
        article = store.load(ARTICLES, id)
        return article, store.load_blocks(article)

    def save_document(self, store, document, blocks):
        store.save_article_blocks(document, blocks)


class SettingBlocksView(BlockDocumentView):
    """
    GET/POST /api/admin/manual/settings/{key}/blocks/

    Same operations as the article block endpoint, on a legal page.
    """

    def load_document(self, store, key=None):
        key = _setting_key(key)
        return key, store.load_setting_blocks(key)

    def save_document(self, store, document, blocks):
        store.save_setting_blocks(document, blocks)


class BlockUploadView(StoreMixin, APIView):
    """
    POST /api/admin/manual/articles/{id}/blocks/{block_id}/upload/

    Multipart body: ``file`` and ``field`` (``url`` for image/video blocks,
    ``leftIcon``/``rightIcon`` for dialogue blocks). The block is only
    changed when the upload succeeded.
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]
    storage_class = MediaStorage

    def post(self, request, id, block_id):
        serializer = BlockUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        store = self.get_store()
        article = store.load(ARTICLES, id)
        editor = BlockEditor(store.load_blocks(article), storage=self.storage_class())
        url = editor.upload(block_id, serializer.validated_data['field'], serializer.validated_data['file'])
        store.save_article_blocks(article, editor.blocks)

        return Response({
            'url': url,
            'block': editor.get(block_id).dump(),
        }, status=status.HTTP_201_CREATED)


class UploadView(APIView):
    """
    POST /api/admin/manual/uploads/

    Generic upload (article thumbnails). Returns the public URL.
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]
    storage_class = MediaStorage

    def post(self, request):
        serializer = UploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        url = self.storage_class().upload(serializer.validated_data['file'])
        return Response({'url': url}, status=status.HTTP_201_CREATED)


# =============================================================================
# SITE SETTINGS
# =============================================================================

def _setting_key(key):
    if key not in SiteSetting.Key.values:
        raise ContentNotFound(f"Unknown setting: {key}")
    return key


class SiteSettingView(StoreMixin, APIView):
    """
    GET/PUT /api/admin/manual/settings/{key}/

    Raw value of a legal page setting (privacy_policy, terms_of_service).
    PUT upserts.

    Request Body (PUT):
    {
        "value": "encoded block document or plain text"
    }
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]

    def get(self, request, key):
        key = _setting_key(key)
        store = self.get_store()
        value = store.load_setting(key)
        return Response({'key': key, 'value': value or '', 'exists': value is not None})

    def put(self, request, key):
        key = _setting_key(key)
        serializer = SiteSettingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        setting = self.get_store().save_setting(key, serializer.validated_data.get('value', ''))
        return Response(SiteSettingSerializer(setting).data)


# =============================================================================
# ANALYTICS
# =============================================================================

class AnalyticsView(StoreMixin, APIView):
    """
    GET /api/admin/manual/analytics/

    Page, article and link rankings recomputed from the raw events.

    Query Parameters:
    - category: category id, 'uncategorized' or 'all' (article ranking filter)
    - page: article ranking page (clamped into range)
    """
    permission_classes = [IsAuthenticated, IsManualAdmin]

    def get(self, request):
        raw = self.get_store().fetch_analytics()
        report = build_report(
            raw,
            category=request.query_params.get('category') or ALL_CATEGORIES,
            page=request.query_params.get('page') or 1,
            per_page=settings.MANUAL_ANALYTICS_PAGE_SIZE,
        )
        return Response(report)
