import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="LicenseRecord",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("identifier", models.CharField(db_index=True, max_length=255, unique=True)),
                ("key", models.CharField(db_index=True, max_length=100, unique=True)),
                ("key_hash", models.CharField(db_index=True, help_text="Hashed version for secure lookup", max_length=64)),
                ("owner_email", models.EmailField(blank=True, max_length=254, null=True)),
                ("expires_at", models.DateTimeField()),
                ("allowed_software", models.JSONField(blank=True, default=list)),
                ("last_activation_ip", models.CharField(blank=True, max_length=45, null=True)),
                ("last_activation_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("failure_count", models.PositiveIntegerField(default=0)),
                ("failure_history", models.JSONField(blank=True, default=list)),
                ("ip_history", models.JSONField(blank=True, default=list)),
                ("blocked_until", models.DateTimeField(blank=True, db_index=True, null=True)),
                ("revision", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "license_records",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["key_hash"], name="license_rec_key_has_8d1f2a_idx"),
                    models.Index(fields=["failure_count", "blocked_until"], name="license_rec_failure_4c7e9b_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("event_id", models.UUIDField(unique=True)),
                ("entity_type", models.CharField(default="license_record", max_length=50)),
                ("entity_id", models.UUIDField()),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("LicenseIssued", "License Issued"),
                            ("LicenseLockedOut", "License Locked Out"),
                            ("LicenseRebound", "License Rebound"),
                        ],
                        max_length=50,
                    ),
                ),
                ("changes", models.JSONField(default=dict, help_text="Details of the change")),
                ("occurred_at", models.DateTimeField()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "audit_logs",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["entity_type", "entity_id"], name="audit_logs_entity__5a2b7c_idx"),
                    models.Index(fields=["created_at"], name="audit_logs_created_9e3d1f_idx"),
                    models.Index(fields=["action"], name="audit_logs_action_2f6a8e_idx"),
                ],
            },
        ),
    ]
