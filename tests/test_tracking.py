"""
Tests for analytics capture. Failures must never reach the caller.
"""
import uuid
from unittest import mock

import pytest
from django.db import DatabaseError

from manual.models import ArticleView, LinkClick, PageView
from manual.tracking import track_article_view, track_link_click, track_page_view

pytestmark = pytest.mark.django_db


class TestTracking:

    def test_page_view(self):
        track_page_view('/article/abc')
        assert PageView.objects.get().path == '/article/abc'

    def test_empty_path_counts_as_root(self):
        track_page_view('')
        assert PageView.objects.get().path == '/'

    def test_article_view(self):
        article_id = uuid.uuid4()
        track_article_view(article_id)
        assert ArticleView.objects.get().article_id == article_id

    def test_link_click(self):
        article_id = uuid.uuid4()
        track_link_click('https://example.com', block_id='b1', article_id=article_id)
        click = LinkClick.objects.get()
        assert click.link_url == 'https://example.com'
        assert click.block_id == 'b1'
        assert click.article_id == article_id

    def test_link_click_without_context(self):
        track_link_click('https://example.com')
        click = LinkClick.objects.get()
        assert click.block_id is None
        assert click.article_id is None


class TestTrackingFailures:

    def test_database_errors_are_swallowed(self):
        with mock.patch.object(PageView.objects, 'using', side_effect=DatabaseError('down')):
            assert track_page_view('/') is None

    def test_invalid_article_id_is_swallowed(self):
        assert track_article_view('not-a-uuid') is None
        assert ArticleView.objects.count() == 0

    def test_link_click_failure(self):
        with mock.patch.object(LinkClick.objects, 'using', side_effect=DatabaseError('down')):
            assert track_link_click('https://example.com') is None
