# Generated manually for adjustments app

import uuid
from decimal import Decimal
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        ('orders', '0001_initial'),
        ('pricing', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AdjustmentReason',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=100)),
                ('code', models.CharField(max_length=50, unique=True)),
                ('active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'adjustment_reasons',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Adjustment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('adjustable_object_id', models.UUIDField()),
                ('source_object_id', models.UUIDField(blank=True, null=True)),
                ('label', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10)),
                ('eligible', models.BooleanField(default=True)),
                ('mandatory', models.BooleanField(default=False)),
                ('included', models.BooleanField(default=False)),
                ('state', models.CharField(choices=[('open', 'Open'), ('closed', 'Closed')], default='open', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='all_adjustments', to='orders.order')),
                ('adjustable_content_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to='contenttypes.contenttype')),
                ('source_content_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype')),
                ('promotion_code', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='pricing.promotioncode')),
                ('adjustment_reason', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='adjustments.adjustmentreason')),
            ],
            options={
                'db_table': 'adjustments',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['adjustable_content_type', 'adjustable_object_id'], name='adjustments_adjustable_idx'),
                    models.Index(fields=['source_content_type', 'source_object_id'], name='adjustments_source_idx'),
                    models.Index(fields=['order', 'state'], name='adjustments_order_state_idx'),
                    models.Index(fields=['eligible'], name='adjustments_eligible_idx'),
                ],
            },
        ),
    ]
