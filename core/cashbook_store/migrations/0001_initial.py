import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("user_id", models.CharField(max_length=255, primary_key=True, serialize=False)),
                ("email", models.CharField(db_index=True, max_length=320)),
                ("display_name", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField()),
            ],
            options={
                "db_table": "cbm_users",
                "ordering": ["user_id"],
            },
        ),
        migrations.CreateModel(
            name="Business",
            fields=[
                ("business_id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("owner_id", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField()),
                ("members", models.JSONField(default=list)),
            ],
            options={
                "db_table": "cbm_businesses",
                "ordering": ["created_at", "business_id"],
            },
        ),
        migrations.CreateModel(
            name="CashBook",
            fields=[
                ("cashbook_id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField()),
                (
                    "business",
                    models.ForeignKey(
                        db_column="business_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cashbooks",
                        to="core_cashbook_store.business",
                    ),
                ),
            ],
            options={
                "db_table": "cbm_cashbooks",
                "ordering": ["created_at", "cashbook_id"],
            },
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("user_id", models.CharField(max_length=255)),
                ("email", models.CharField(max_length=320)),
                (
                    "role",
                    models.CharField(
                        choices=[
                            ("owner", "Owner"),
                            ("operator", "Operator"),
                            ("viewer", "Viewer"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "business",
                    models.ForeignKey(
                        db_column="business_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="member_records",
                        to="core_cashbook_store.business",
                    ),
                ),
            ],
            options={
                "db_table": "cbm_members",
                "ordering": ["business_id", "user_id"],
            },
        ),
        migrations.AddConstraint(
            model_name="member",
            constraint=models.UniqueConstraint(
                fields=("business", "user_id"),
                name="uq_member_business_user",
            ),
        ),
        migrations.CreateModel(
            name="Entry",
            fields=[
                ("entry_id", models.UUIDField(editable=False, primary_key=True, serialize=False)),
                (
                    "type",
                    models.CharField(
                        choices=[("in", "Cash In"), ("out", "Cash Out")],
                        max_length=3,
                    ),
                ),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                ("date", models.DateField()),
                ("remark", models.CharField(max_length=500)),
                ("created_at", models.DateTimeField()),
                ("created_by", models.CharField(max_length=255)),
                (
                    "cashbook",
                    models.ForeignKey(
                        db_column="cashbook_id",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="entries",
                        to="core_cashbook_store.cashbook",
                    ),
                ),
            ],
            options={
                "db_table": "cbm_entries",
                "ordering": ["-date", "-created_at"],
            },
        ),
        migrations.AddIndex(
            model_name="entry",
            index=models.Index(
                fields=["cashbook", "-date", "-created_at"],
                name="idx_entry_book_date_created",
            ),
        ),
    ]
