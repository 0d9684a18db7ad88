from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='ItemTag',
            fields=[
                (
                    'id',
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name='ID',
                    ),
                ),
                (
                    'path',
                    models.CharField(
                        help_text='Relative path inside the gallery: folder/file.ext',
                        max_length=1024,
                        unique=True,
                    ),
                ),
                (
                    'value',
                    models.BinaryField(
                        help_text='Opaque tag blob set by the host',
                    ),
                ),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Item tag',
                'verbose_name_plural': 'Item tags',
                'ordering': ['path'],
            },
        ),
    ]
