"""
Manual Serializers

Public serializers expose only what the reader-facing site needs; admin
serializers expose every editable field.
"""
from rest_framework import serializers

from .blocks import BLOCK_TYPES, block_from_dict
from .codec import decode_blocks, encode_blocks, is_block_document
from .models import Article, Category, News, SiteSetting

EDITOR_OPERATIONS = ['add', 'update', 'delete', 'duplicate', 'move']


# =============================================================================
# PUBLIC SERIALIZERS
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    """Category with the number of published articles, when annotated."""
    article_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'description', 'display_order', 'article_count']


class ArticleListSerializer(serializers.ModelSerializer):
    """Article card: no body."""
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    category_slug = serializers.CharField(source='category.slug', read_only=True, default=None)

    class Meta:
        model = Article
        fields = [
            'id', 'title', 'excerpt',
            'category', 'category_name', 'category_slug',
            'author', 'featured', 'thumbnail_url',
            'created_at', 'updated_at',
        ]


class NewsSerializer(serializers.ModelSerializer):
    article_title = serializers.CharField(source='article.title', read_only=True, default=None)

    class Meta:
        model = News
        fields = ['id', 'title', 'content', 'article', 'article_title', 'created_at']


class PageViewSerializer(serializers.Serializer):
    path = serializers.CharField(max_length=500, allow_blank=True, required=False, default='/')


class LinkClickSerializer(serializers.Serializer):
    """Query parameters of the tracked redirect."""
    url = serializers.URLField(max_length=2000)
    block = serializers.CharField(max_length=64, required=False, allow_blank=True)
    article = serializers.UUIDField(required=False)

    def validate_url(self, value):
        if not value.lower().startswith(('http://', 'https://')):
            raise serializers.ValidationError('Only http and https links can be followed.')
        return value


# =============================================================================
# ADMIN SERIALIZERS
# =============================================================================

class CategoryAdminSerializer(serializers.ModelSerializer):
    article_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'description', 'display_order',
            'article_count', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {'slug': {'required': False, 'allow_blank': True}}


class ArticleAdminSerializer(serializers.ModelSerializer):
    """
    Admin serializer for articles.

    ``content`` accepts either an encoded block document or plain text.
    ``blocks`` may be sent instead of ``content`` to save a whole document;
    it is validated block by block and encoded into ``content``.
    """
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    blocks = serializers.ListField(
        child=serializers.DictField(),
        write_only=True,
        required=False,
    )

    class Meta:
        model = Article
        fields = [
            'id', 'title', 'excerpt', 'content', 'blocks',
            'category', 'category_name',
            'author', 'published', 'featured', 'thumbnail_url',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_content(self, value):
        if value and is_block_document(value):
            # Normalize: invalid blocks become unknown blocks, ids/orders coerced
            return encode_blocks(decode_blocks(value))
        return value

    def validate(self, attrs):
        blocks = attrs.pop('blocks', None)
        if blocks is not None:
            attrs['content'] = encode_blocks([block_from_dict(item) for item in blocks])
        return attrs


class NewsAdminSerializer(serializers.ModelSerializer):
    article_title = serializers.CharField(source='article.title', read_only=True, default=None)

    class Meta:
        model = News
        fields = ['id', 'title', 'content', 'published', 'article', 'article_title', 'created_at']
        read_only_fields = ['id', 'created_at']


class SiteSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = SiteSetting
        fields = ['key', 'value', 'updated_at']
        read_only_fields = ['key', 'updated_at']


class BlockOperationSerializer(serializers.Serializer):
    """One editor operation, e.g. ``{"op": "move", "id": "...", "direction": "up"}``."""
    op = serializers.ChoiceField(choices=EDITOR_OPERATIONS)
    id = serializers.CharField(required=False)
    type = serializers.CharField(required=False)
    content = serializers.JSONField(required=False)
    direction = serializers.ChoiceField(choices=['up', 'down'], required=False)

    def validate(self, attrs):
        op = attrs['op']
        if op == 'add':
            if attrs.get('type') not in BLOCK_TYPES:
                raise serializers.ValidationError({'type': f"Must be one of: {', '.join(BLOCK_TYPES)}"})
        elif not attrs.get('id'):
            raise serializers.ValidationError({'id': 'This field is required.'})
        if op == 'move' and not attrs.get('direction'):
            raise serializers.ValidationError({'direction': 'This field is required.'})
        if op == 'update' and not isinstance(attrs.get('content', {}), dict):
            raise serializers.ValidationError({'content': 'Must be an object.'})
        return attrs


class BlockUploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    field = serializers.CharField(required=False, default='url')


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField()
