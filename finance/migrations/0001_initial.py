from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Ledger",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("currency", models.CharField(default="USD", max_length=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("owner", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="owned_ledgers", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=50)),
                ("type", models.CharField(choices=[("Income", "Income"), ("Expense", "Expense")], max_length=7)),
                ("color", models.CharField(default="#999999", max_length=20)),
                ("icon", models.CharField(blank=True, default="", max_length=50)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ledger", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="categories", to="finance.ledger")),
            ],
            options={
                "verbose_name_plural": "Categories",
                "ordering": ["type", "name", "id"],
            },
        ),
        migrations.CreateModel(
            name="Transaction",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("type", models.CharField(choices=[("Income", "Income"), ("Expense", "Expense")], max_length=7)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("date", models.DateField(default=django.utils.timezone.now)),
                ("description", models.CharField(max_length=255)),
                ("note", models.TextField(blank=True, default="")),
                ("receipt_image", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("category", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="transactions", to="finance.category")),
                ("ledger", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="transactions", to="finance.ledger")),
            ],
            options={
                "ordering": ["-date", "-id"],
            },
        ),
        migrations.CreateModel(
            name="LedgerShare",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=[("editor", "Editor"), ("viewer", "Viewer")], default="editor", max_length=6)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("ledger", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="shares", to="finance.ledger")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="ledger_shares", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.AddConstraint(
            model_name="ledgershare",
            constraint=models.UniqueConstraint(fields=("ledger", "user"), name="uq_ledgershare_ledger_user"),
        ),
        migrations.CreateModel(
            name="ActivityLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(choices=[("CREATE", "Create"), ("UPDATE", "Update"), ("DELETE", "Delete"), ("CLEAR", "Clear")], max_length=6)),
                ("entity_type", models.CharField(choices=[("TRANSACTION", "Transaction"), ("CATEGORY", "Category"), ("LEDGER", "Ledger"), ("STORAGE", "Storage")], max_length=11)),
                ("entity_id", models.CharField(blank=True, default="", max_length=64)),
                ("message", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("ledger", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="activity", to="finance.ledger")),
                ("user", models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="activity", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-id"],
            },
        ),
    ]
