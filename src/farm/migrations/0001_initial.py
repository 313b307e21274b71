from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Wiki",
            fields=[
                (
                    "dbname",
                    models.CharField(db_column="wiki_dbname", max_length=64, primary_key=True, serialize=False),
                ),
                (
                    "dbcluster",
                    models.CharField(blank=True, db_column="wiki_dbcluster", max_length=5, null=True),
                ),
                ("sitename", models.CharField(db_column="wiki_sitename", max_length=128)),
                ("language", models.CharField(db_column="wiki_language", default="en", max_length=12)),
                ("url", models.CharField(blank=True, db_column="wiki_url", max_length=512, null=True)),
                (
                    "category",
                    models.CharField(db_column="wiki_category", default="uncategorised", max_length=64),
                ),
                ("creation", models.CharField(blank=True, db_column="wiki_creation", max_length=14, null=True)),
                ("deleted", models.BooleanField(db_column="wiki_deleted", db_index=True, default=False)),
                ("private", models.BooleanField(db_column="wiki_private", default=False)),
                (
                    "closed_timestamp",
                    models.CharField(blank=True, db_column="wiki_closed_timestamp", max_length=14, null=True),
                ),
                ("inactive_exempt", models.BooleanField(db_column="wiki_inactive_exempt", default=False)),
                (
                    "inactive_timestamp",
                    models.CharField(blank=True, db_column="wiki_inactive_timestamp", max_length=14, null=True),
                ),
            ],
            options={
                "db_table": "cw_wikis",
                "ordering": ["dbname"],
            },
        ),
    ]
