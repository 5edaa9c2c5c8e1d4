import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Folder',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, help_text='Containing folder, empty for the root directory', null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='files.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='folders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Folder',
                'verbose_name_plural': 'Folders',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['user', 'parent'], name='folders_user_parent_idx')],
            },
        ),
        migrations.CreateModel(
            name='File',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(help_text='Original filename as uploaded', max_length=255)),
                ('file_type', models.CharField(blank=True, default='', help_text='Lowercase extension without dot', max_length=32)),
                ('mime_type', models.CharField(max_length=255)),
                ('size_bytes', models.BigIntegerField(help_text='File size in bytes')),
                ('file', models.FileField(help_text='Path in storage: {user_id}/{timestamp}-{random}-{name}', max_length=1024, unique=True, upload_to='')),
                ('is_public', models.BooleanField(default=False)),
                ('checksum_sha256', models.CharField(blank=True, default='', help_text='SHA256 hash for integrity verification', max_length=64)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('folder', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name='files', to='files.folder')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='files', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'File',
                'verbose_name_plural': 'Files',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['user', 'folder'], name='files_user_folder_idx'),
                    models.Index(fields=['user', '-created_at'], name='files_user_recent_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserQuota',
            fields=[
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name='quota', serialize=False, to=settings.AUTH_USER_MODEL)),
                ('quota_bytes', models.BigIntegerField(default=10485760, help_text='Storage quota limit in bytes')),
                ('used_bytes', models.BigIntegerField(default=0, help_text='Currently used storage in bytes')),
            ],
            options={
                'verbose_name': 'User Quota',
                'verbose_name_plural': 'User Quotas',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quota_bytes__gte', 0)), name='quota_bytes_non_negative'),
                    models.CheckConstraint(condition=models.Q(('used_bytes__gte', 0)), name='used_bytes_non_negative'),
                ],
            },
        ),
    ]
