"""
Management command to seed the manual site with starter content.

Creates categories, a handful of published sample articles written as
block documents, a welcome news item and the two legal pages.

Usage:
    python manage.py seed_manual_content
    python manage.py seed_manual_content --clear   # Clear articles/categories/news and reseed
    python manage.py seed_manual_content --force   # Overwrite existing legal pages
"""
from django.core.management.base import BaseCommand

from manual.blocks import default_block, make_content
from manual.codec import encode_blocks
from manual.models import Article, Category, News, SiteSetting
from manual.store import ContentStore


def build_document(*specs):
    """``(type, content)`` pairs to an encoded block document."""
    blocks = []
    for order, (block_type, content) in enumerate(specs):
        block = default_block(block_type, order=order)
        blocks.append(block.model_copy(update={'content': make_content(block_type, content)}))
    return encode_blocks(blocks)


class Command(BaseCommand):
    help = 'Seed the manual site with categories, sample articles, news and legal pages'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing articles, categories and news before seeding',
        )
        parser.add_argument(
            '--force',
            action='store_true',
            help='Overwrite legal pages that already have content',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing manual content...')
            News.objects.all().delete()
            Article.objects.all().delete()
            Category.objects.all().delete()
            self.stdout.write(self.style.SUCCESS('Cleared existing content'))

        self.stdout.write('Seeding categories and articles...')

        for order, cat_data in enumerate(self.get_categories_data()):
            category, created = Category.objects.update_or_create(
                name=cat_data['name'],
                defaults={
                    'description': cat_data['description'],
                    'display_order': order,
                }
            )
            self.stdout.write(f"  {'Created' if created else 'Updated'} category: {category.name}")

            for article_data in cat_data.get('articles', []):
                article, art_created = Article.objects.update_or_create(
                    title=article_data['title'],
                    category=category,
                    defaults={
                        'excerpt': article_data['excerpt'],
                        'content': build_document(*article_data['blocks']),
                        'featured': article_data.get('featured', False),
                        'published': True,
                    }
                )
                self.stdout.write(f"    {'Created' if art_created else 'Updated'} article: {article.title}")

        first_article = Article.objects.filter(published=True).order_by('created_at').first()
        News.objects.get_or_create(
            title='マニュアルサイトを公開しました',
            defaults={
                'content': '基本的な使い方から順に記事を追加していきます。',
                'published': True,
                'article': first_article,
            }
        )

        self.seed_legal_pages(force=options['force'])

        self.stdout.write(self.style.SUCCESS(
            f'\nSeeding complete! {Category.objects.count()} categories, '
            f'{Article.objects.count()} articles, {News.objects.count()} news'
        ))

    def seed_legal_pages(self, force=False):
        store = ContentStore()
        for key, specs in self.get_legal_pages().items():
            if store.load_setting(key) and not force:
                self.stdout.write(self.style.WARNING(f'  Skipped {key} (already set, use --force)'))
                continue
            store.save_setting(key, build_document(*specs))
            self.stdout.write(f'  Saved {key}')

    def get_legal_pages(self):
        return {
            SiteSetting.Key.PRIVACY_POLICY: [
                ('heading', {'text': 'プライバシーポリシー', 'level': 1}),
                ('paragraph', {'text': '当サイトは、利用状況の把握のためにページの閲覧や記事内リンクのクリックを記録します。個人を特定する情報は記録しません。'}),
                ('heading', {'text': 'お問い合わせ', 'level': 2}),
                ('paragraph', {'text': '本ポリシーに関するお問い合わせは運営者までご連絡ください。'}),
            ],
            SiteSetting.Key.TERMS_OF_SERVICE: [
                ('heading', {'text': '利用規約', 'level': 1}),
                ('paragraph', {'text': '本サイトの内容は予告なく変更される場合があります。'}),
                ('list', {'items': [
                    '掲載内容の無断転載を禁止します。',
                    '掲載内容の利用により生じた損害について、運営者は責任を負いません。',
                ]}),
            ],
        }

    def get_categories_data(self):
        """Return all categories and articles data."""
        return [
            {
                'name': '基本設定',
                'description': 'はじめに行う設定と基本的な使い方',
                'articles': [
                    {
                        'title': 'はじめに',
                        'excerpt': 'このマニュアルの読み方と基本的な操作を説明します。',
                        'featured': True,
                        'blocks': [
                            ('heading', {'text': 'はじめに', 'level': 2}),
                            ('paragraph', {'text': 'このマニュアルでは、サービスの基本的な使い方を順番に説明します。'}),
                            ('note', {'text': '操作画面は更新により変わることがあります。'}),
                            ('list', {'items': ['アカウントを作成する', '初期設定を行う', '記事を検索する']}),
                        ],
                    },
                    {
                        'title': '初期設定の手順',
                        'excerpt': '最初にログインしたときに行う設定です。',
                        'blocks': [
                            ('heading', {'text': '初期設定', 'level': 2, 'design_style': 2}),
                            ('paragraph', {'text': '設定画面を開き、表示名と通知設定を入力してください。'}),
                            ('dialogue', {'items': [
                                {'alignment': 'left', 'text': '設定はどこから開けますか？'},
                                {'alignment': 'right', 'text': '画面右上のメニューから開けます。'},
                            ]}),
                        ],
                    },
                ],
            },
            {
                'name': 'データ連携',
                'description': '外部サービスとの連携方法',
                'articles': [
                    {
                        'title': 'APIで連携する',
                        'excerpt': 'APIキーの発行と呼び出し例です。',
                        'blocks': [
                            ('heading', {'text': 'APIキーの発行', 'level': 2}),
                            ('paragraph', {'text': '詳しい仕様は https://example.com/docs を参照してください。'}),
                            ('code', {'code': 'curl -H "Authorization: Bearer <key>" https://api.example.com/v1/items', 'language': 'bash'}),
                            ('separator', {}),
                            ('quote', {'text': 'APIキーは他人に共有しないでください。', 'author': 'サポートチーム'}),
                        ],
                    },
                ],
            },
        ]
