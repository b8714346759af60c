import uuid

import django.db.models.deletion
from django.db import migrations
from django.db import models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="ExperimentSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("paradigm", models.CharField(max_length=50)),
                ("random_seed", models.CharField(max_length=64)),
                ("config", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("is_active", models.BooleanField(default=True)),
            ],
        ),
        migrations.CreateModel(
            name="ParticipantRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("participant_id", models.CharField(max_length=100)),
                ("participant_name", models.CharField(blank=True, max_length=200)),
                ("share_data", models.BooleanField(default=False)),
                ("paradigm", models.CharField(max_length=50)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("practice_trials", models.JSONField(blank=True, default=list)),
                ("trials", models.JSONField(blank=True, default=list)),
                ("summary_metrics", models.JSONField(blank=True, default=dict)),
                ("quality_flags", models.JSONField(blank=True, default=list)),
                (
                    "completion_status",
                    models.CharField(
                        choices=[
                            ("complete", "Complete"),
                            ("abandoned", "Abandoned"),
                            ("in_progress", "In Progress"),
                        ],
                        default="in_progress",
                        max_length=20,
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="tasks.experimentsession",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["session", "completion_status"], name="participant_status_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("session", "participant_id"), name="unique_participant_per_session"
                    ),
                ],
            },
        ),
    ]
