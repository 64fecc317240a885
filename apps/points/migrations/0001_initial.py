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
            name='LoyaltyPointTimer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('points_awarded', models.IntegerField(default=0, help_text='Points paid out when the timer fires')),
                ('frozen_points', models.IntegerField(default=0, help_text='Withheld while a return is open')),
                ('frozen_by', models.JSONField(blank=True, default=list, help_text='Ids of the returns holding frozen points')),
                ('state', models.CharField(choices=[('pending', 'Pending'), ('credited', 'Credited'), ('void', 'Void')], default='pending', max_length=10)),
                ('scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('credited_at', models.DateTimeField(blank=True, null=True)),
                ('version', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='point_timer', to='orders.order')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='point_timers', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'loyalty_point_timers',
                'indexes': [models.Index(fields=['state', 'scheduled_at'], name='point_timers_due_idx')],
            },
        ),
        migrations.CreateModel(
            name='PointsTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_type', models.CharField(choices=[('redemption', 'Points Redeemed'), ('credit', 'Order Points Credited'), ('return_deduction', 'Deducted for Return'), ('return_release', 'Released after Return')], max_length=20)),
                ('amount', models.IntegerField()),
                ('balance_after', models.IntegerField()),
                ('description', models.CharField(blank=True, max_length=200)),
                ('reference_id', models.CharField(blank=True, max_length=100, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='points_transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Points Transaction',
                'verbose_name_plural': 'Points Transactions',
                'db_table': 'points_transactions',
                'ordering': ['-created_at'],
            },
        ),
    ]
