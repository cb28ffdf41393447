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
            name="UserProfile",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "display_name",
                    models.CharField(blank=True, max_length=255),
                ),
                (
                    "mail_notification",
                    models.CharField(
                        choices=[
                            ("all", "For any event on all my projects"),
                            (
                                "selected",
                                "For any event on the selected projects only",
                            ),
                            (
                                "only_my_events",
                                "Only for things I watch or I'm involved in",
                            ),
                            (
                                "only_assigned",
                                "Only for things I am assigned to",
                            ),
                            (
                                "only_owner",
                                "Only for things I am the owner of",
                            ),
                            ("none", "No events"),
                        ],
                        default="only_my_events",
                        help_text="'No events' suppresses all watcher mail.",
                        max_length=20,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
    ]
