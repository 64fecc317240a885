from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('slug', models.SlugField(help_text='Stable product reference used by order lines', max_length=200, unique=True)),
                ('name', models.CharField(max_length=200)),
                ('price_cents', models.IntegerField(default=0, help_text='Current unit price in cents')),
                ('stock_quantity', models.IntegerField(default=0)),
                ('in_stock', models.BooleanField(default=False)),
                ('variations', models.JSONField(blank=True, default=list)),
                ('create_time', models.DateTimeField(auto_now_add=True)),
                ('update_time', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'products',
            },
        ),
    ]
