import uuid

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
            name="Warranty",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("product_name", models.CharField(max_length=200)),
                ("brand", models.CharField(blank=True, max_length=120)),
                ("category", models.CharField(blank=True, max_length=120)),
                ("retailer", models.CharField(blank=True, max_length=120)),
                ("serial_number", models.CharField(blank=True, max_length=120)),
                ("notes", models.TextField(blank=True)),
                ("image", models.TextField(blank=True, help_text="Image URL or data URI")),
                ("purchase_date", models.DateField()),
                ("expiry_date", models.DateField(db_index=True)),
                ("reminder_preference", models.CharField(choices=[("1d", "1 day before"), ("7d", "1 week before"), ("30d", "1 month before"), ("none", "No reminder")], default="7d", max_length=10)),
                ("last_notified_at", models.DateTimeField(blank=True, help_text="When the last expiry reminder was sent", null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="warranties", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["expiry_date"],
                "indexes": [
                    models.Index(fields=["owner", "expiry_date"], name="warranty_owner_expiry_idx"),
                    models.Index(fields=["expiry_date", "last_notified_at"], name="warranty_due_idx"),
                ],
            },
        ),
    ]
