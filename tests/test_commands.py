"""
Tests for the seed_manual_content management command.
"""
from io import StringIO

import pytest
from django.core.management import call_command

from manual.codec import decode_blocks, is_block_document
from manual.models import Article, Category, News, SiteSetting

pytestmark = pytest.mark.django_db


class TestSeedManualContent:

    def test_seeds_content(self):
        out = StringIO()
        call_command('seed_manual_content', stdout=out)

        assert Category.objects.count() == 2
        assert Article.objects.filter(published=True).count() == 3
        assert Article.objects.filter(featured=True).count() == 1
        assert News.objects.get().article is not None
        assert all(is_block_document(article.content) for article in Article.objects.all())
        assert 'Seeding complete!' in out.getvalue()

    def test_is_idempotent(self):
        call_command('seed_manual_content', stdout=StringIO())
        call_command('seed_manual_content', stdout=StringIO())
        assert Article.objects.count() == 3
        assert News.objects.count() == 1

    def test_legal_pages_are_kept_unless_forced(self):
        SiteSetting.objects.create(key=SiteSetting.Key.PRIVACY_POLICY, value='custom')

        call_command('seed_manual_content', stdout=StringIO())
        assert SiteSetting.objects.get(key=SiteSetting.Key.PRIVACY_POLICY).value == 'custom'

        call_command('seed_manual_content', '--force', stdout=StringIO())
        value = SiteSetting.objects.get(key=SiteSetting.Key.PRIVACY_POLICY).value
        assert decode_blocks(value)[0].content.text == 'プライバシーポリシー'
