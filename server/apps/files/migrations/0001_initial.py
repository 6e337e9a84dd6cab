import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Folder',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('shop', models.CharField(db_index=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Folder',
                'verbose_name_plural': 'Folders',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['shop', '-created_at'], name='folders_shop_recent_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('filename', models.CharField(help_text='Server generated name of the stored blob', max_length=255)),
                ('original_name', models.CharField(help_text='Filename supplied by the client on upload', max_length=255)),
                ('mime_type', models.CharField(default='application/octet-stream', max_length=255)),
                ('size', models.BigIntegerField(help_text='File size in bytes')),
                ('path', models.CharField(help_text='Storage key of the blob', max_length=1024, unique=True)),
                ('shop', models.CharField(db_index=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('folder', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='files', to='files.folder')),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['shop', 'folder'], name='files_shop_folder_idx'),
                    models.Index(fields=['shop', '-created_at'], name='files_shop_recent_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('size__gte', 0)), name='files_size_non_negative'),
                ],
            },
        ),
    ]
