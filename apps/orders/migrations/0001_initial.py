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
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(max_length=50, unique=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('shipped', 'Shipped'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled'), ('return_requested', 'Return requested'), ('return_completed', 'Return completed')], default='pending', max_length=20)),
                ('subtotal_cents', models.IntegerField(help_text='Sum of unit price x quantity over all lines')),
                ('shipping_cost_cents', models.IntegerField(blank=True, null=True)),
                ('discount_cents', models.IntegerField(default=0, help_text='Order-level discount')),
                ('discount_code', models.CharField(blank=True, default='', max_length=50)),
                ('total_cents', models.IntegerField(help_text='Amount charged')),
                ('bonus_points_redeemed', models.IntegerField(default=0)),
                ('bonus_points_earned', models.IntegerField(default=0, help_text='Only ever lowered, by returns')),
                ('bonus_points_credited', models.BooleanField(default=False)),
                ('bonus_points_credited_at', models.DateTimeField(blank=True, null=True)),
                ('bonus_points_scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('bonus_points_deducted', models.IntegerField(default=0, help_text='Taken back from the live balance by returns')),
                ('bonus_points_deducted_at', models.DateTimeField(blank=True, null=True)),
                ('delivered_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0, help_text='Optimistic concurrency token')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(blank=True, help_text='Null for guest orders', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['status'], name='orders_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('line_no', models.PositiveIntegerField(help_text='Stable ordinal of the line within its order')),
                ('product_slug', models.CharField(help_text='Product reference', max_length=200)),
                ('name', models.CharField(max_length=200)),
                ('unit_price_cents', models.IntegerField()),
                ('quantity', models.PositiveIntegerField()),
                ('selected_options', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
            ],
            options={
                'db_table': 'order_items',
                'ordering': ['line_no'],
                'indexes': [models.Index(fields=['product_slug'], name='order_items_product_idx')],
                'unique_together': {('order', 'line_no')},
            },
        ),
    ]
