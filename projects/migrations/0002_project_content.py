from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    dependencies = [
        ("projects", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="project",
            name="artist_bio",
            field=models.TextField(blank=True, default=""),
        ),
        migrations.AddField(
            model_name="project",
            name="artist_message",
            field=models.TextField(blank=True, default="", help_text='"From the artist" note on the project page'),
        ),
        migrations.AddField(
            model_name="project",
            name="artist_message_video_url",
            field=models.URLField(blank=True, default=""),
        ),
        migrations.AddField(
            model_name="project",
            name="audio_preview_url",
            field=models.URLField(blank=True, default=""),
        ),
        migrations.CreateModel(
            name="Testimonial",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("profile_image_url", models.URLField(blank=True, default="")),
                ("moment", models.CharField(blank=True, default="", help_text="Headline for the story", max_length=255)),
                ("story", models.TextField()),
                ("date", models.DateField(blank=True, null=True)),
                ("verified", models.BooleanField(default=False)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="testimonials",
                        to="projects.project",
                    ),
                ),
            ],
            options={"ordering": ["position", "id"]},
        ),
        migrations.CreateModel(
            name="BudgetCategory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="budget_categories",
                        to="projects.project",
                    ),
                ),
            ],
            options={"ordering": ["position", "id"], "verbose_name_plural": "budget categories"},
        ),
        migrations.CreateModel(
            name="BudgetLineItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("notes", models.TextField(blank=True, default="")),
                ("cost", models.DecimalField(decimal_places=2, max_digits=12)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="line_items",
                        to="projects.budgetcategory",
                    ),
                ),
            ],
            options={"ordering": ["position", "id"]},
        ),
    ]
