"""
Shared pytest fixtures for manual tests.
"""
import pytest
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from manual.blocks import HeadingBlock, HeadingContent, ParagraphBlock, ParagraphContent
from manual.codec import encode_blocks
from manual.models import Article, Category

User = get_user_model()


@pytest.fixture(autouse=True)
def clear_cache():
    """Clear cache before and after each test to prevent pollution."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        username='manual_admin',
        email='admin@example.com',
        password='testpass123',
        is_staff=True,
    )


@pytest.fixture
def regular_user(db):
    return User.objects.create_user(
        username='manual_reader',
        email='reader@example.com',
        password='testpass123',
    )


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def sample_blocks():
    return [
        HeadingBlock(id='h1', content=HeadingContent(text='はじめに', level=2), order=0),
        ParagraphBlock(id='p1', content=ParagraphContent(text='詳しくは https://example.com を参照'), order=1),
    ]


@pytest.fixture
def category(db):
    return Category.objects.create(name='基本設定', slug='basics', display_order=1)


@pytest.fixture
def published_article(category, sample_blocks):
    return Article.objects.create(
        title='はじめに',
        excerpt='基本的な使い方',
        content=encode_blocks(sample_blocks),
        category=category,
        published=True,
    )


@pytest.fixture
def draft_article(category):
    return Article.objects.create(
        title='下書き',
        content='legacy text body',
        category=category,
        published=False,
    )
