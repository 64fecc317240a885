import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ReturnRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('processing', 'Processing'), ('completed', 'Completed'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('notes', models.TextField(blank=True, default='')),
                ('refund_method', models.CharField(blank=True, choices=[('paypal', 'PayPal'), ('klarna', 'Klarna'), ('bank', 'Bank transfer'), ('other', 'Other')], default='', max_length=20)),
                ('refund_reference', models.CharField(blank=True, default='', max_length=200)),
                ('refund_amount_cents', models.IntegerField(blank=True, null=True)),
                ('items_refund_cents', models.IntegerField(blank=True, null=True)),
                ('shipping_refund_cents', models.IntegerField(blank=True, null=True)),
                ('is_full_return', models.BooleanField(default=False)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('restocked_at', models.DateTimeField(blank=True, null=True)),
                ('frozen_points', models.IntegerField(default=0, help_text='Withheld from the pending grant on creation')),
                ('points_deducted', models.IntegerField(default=0)),
                ('points_settled_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='return_requests', to='orders.order')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='return_requests', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'return_requests',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['order', 'status'], name='return_requests_order_idx')],
            },
        ),
        migrations.CreateModel(
            name='ReturnItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('line_no', models.PositiveIntegerField()),
                ('product_slug', models.CharField(max_length=200)),
                ('name', models.CharField(max_length=200)),
                ('unit_price_cents', models.IntegerField()),
                ('selected_options', models.JSONField(blank=True, default=dict)),
                ('requested_quantity', models.PositiveIntegerField(help_text='Quantity the customer asked to return')),
                ('quantity', models.PositiveIntegerField(help_text='Quantity to take back, never above requested')),
                ('accepted', models.BooleanField(default=False)),
                ('effective_unit_cents', models.IntegerField(blank=True, null=True)),
                ('refund_cents', models.IntegerField(blank=True, null=True)),
                ('order_item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='return_items', to='orders.orderitem')),
                ('return_request', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='returns.returnrequest')),
            ],
            options={
                'db_table': 'return_items',
                'ordering': ['line_no'],
                'unique_together': {('return_request', 'line_no')},
            },
        ),
    ]
