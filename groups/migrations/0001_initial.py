import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RegistryConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("next_group_id", models.PositiveBigIntegerField(default=0)),
                ("max_groups", models.PositiveBigIntegerField(default=1000)),
                ("creation_fee", models.PositiveBigIntegerField(default=1000)),
                (
                    "authority_contract",
                    models.CharField(
                        blank=True,
                        help_text="Set once; receives every creation fee",
                        max_length=170,
                        null=True,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Registry Config",
                "verbose_name_plural": "Registry Config",
            },
        ),
        migrations.CreateModel(
            name="Group",
            fields=[
                ("id", models.PositiveBigIntegerField(primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=100, unique=True)),
                ("max_members", models.PositiveSmallIntegerField()),
                ("contrib_amount", models.PositiveBigIntegerField()),
                ("cycle_duration", models.PositiveBigIntegerField()),
                ("penalty_rate", models.PositiveSmallIntegerField(help_text="Percentage")),
                ("voting_threshold", models.PositiveSmallIntegerField(help_text="Percentage")),
                (
                    "group_type",
                    models.CharField(
                        choices=[("rural", "Rural"), ("urban", "Urban"), ("community", "Community")],
                        max_length=20,
                    ),
                ),
                ("interest_rate", models.PositiveSmallIntegerField()),
                ("grace_period", models.PositiveSmallIntegerField()),
                ("location", models.CharField(max_length=100)),
                (
                    "currency",
                    models.CharField(
                        choices=[("STX", "STX"), ("USD", "USD"), ("BTC", "BTC")],
                        max_length=10,
                    ),
                ),
                ("min_contrib", models.PositiveBigIntegerField()),
                ("max_loan", models.PositiveBigIntegerField()),
                ("status", models.BooleanField(default=True)),
                ("creator", models.CharField(db_index=True, max_length=170)),
                ("created_at", models.PositiveBigIntegerField()),
                ("last_updated_at", models.PositiveBigIntegerField()),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="GroupUpdate",
            fields=[
                (
                    "group",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="last_update",
                        serialize=False,
                        to="groups.group",
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("max_members", models.PositiveSmallIntegerField()),
                ("contrib_amount", models.PositiveBigIntegerField()),
                ("timestamp", models.PositiveBigIntegerField()),
                ("updater", models.CharField(max_length=170)),
            ],
        ),
    ]
