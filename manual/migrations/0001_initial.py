# Generated manually for the manual app initial schema
from django.db import migrations, models
import django.db.models.deletion
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('name', models.CharField(max_length=100, unique=True, help_text="Category name (e.g., '基本設定')")),
                ('slug', models.SlugField(max_length=100, unique=True, allow_unicode=True, help_text='URL-friendly identifier')),
                ('description', models.TextField(blank=True, help_text='Brief description of what this category covers')),
                ('display_order', models.IntegerField(default=0, help_text='Order in which categories appear (lower = first)')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'manual_category',
                'ordering': ['display_order', 'name'],
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
            },
        ),
        migrations.CreateModel(
            name='Article',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('title', models.CharField(max_length=255, help_text='Article title')),
                ('excerpt', models.TextField(blank=True, help_text='Short summary shown on article cards')),
                ('content', models.TextField(blank=True, default='', help_text='Encoded block document (legacy rows: plain text)')),
                ('author', models.CharField(max_length=100, default='管理者')),
                ('published', models.BooleanField(default=False, db_index=True)),
                ('featured', models.BooleanField(default=False)),
                ('thumbnail_url', models.URLField(max_length=500, blank=True, help_text='Card thumbnail image')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='articles',
                    to='manual.category',
                    help_text='Category this article belongs to',
                )),
            ],
            options={
                'db_table': 'manual_article',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='article',
            index=models.Index(fields=['published', 'created_at'], name='manual_art_pub_created_idx'),
        ),
        migrations.AddIndex(
            model_name='article',
            index=models.Index(fields=['category', 'published'], name='manual_art_cat_pub_idx'),
        ),
        migrations.CreateModel(
            name='News',
            fields=[
                ('id', models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, serialize=False)),
                ('title', models.CharField(max_length=255)),
                ('content', models.TextField(blank=True)),
                ('published', models.BooleanField(default=False, db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('article', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name='news',
                    to='manual.article',
                    help_text='Article opened when the news item is clicked',
                )),
            ],
            options={
                'db_table': 'manual_news',
                'ordering': ['-created_at'],
                'verbose_name_plural': 'News',
            },
        ),
        migrations.CreateModel(
            name='SiteSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.TextField(blank=True, default='')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'manual_site_setting',
                'ordering': ['key'],
            },
        ),
        migrations.CreateModel(
            name='PageView',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('path', models.CharField(max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'db_table': 'manual_page_view',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='ArticleView',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('article_id', models.UUIDField(db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'db_table': 'manual_article_view',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='LinkClick',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('link_url', models.URLField(max_length=2000)),
                ('block_id', models.CharField(max_length=64, blank=True, null=True)),
                ('article_id', models.UUIDField(blank=True, null=True, db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
            ],
            options={
                'db_table': 'manual_link_click',
                'ordering': ['-created_at'],
            },
        ),
    ]
