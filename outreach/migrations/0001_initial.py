from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="NewsletterSubscriber",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="NetworkSubmission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("first_name", models.CharField(max_length=150)),
                ("last_name", models.CharField(max_length=150)),
                ("email", models.EmailField(max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=50)),
                ("company_name", models.CharField(blank=True, default="", max_length=255)),
                (
                    "specialty",
                    models.CharField(
                        choices=[
                            ("graphic-design", "Graphic design"),
                            ("video-photo", "Video / photography"),
                            ("publicity", "Publicity"),
                            ("marketing", "Marketing"),
                            ("social-branding", "Social media / branding"),
                            ("engineering-producing", "Engineering / producing"),
                            ("influencer", "Influencer"),
                            ("management", "Management"),
                            ("booking", "Booking"),
                            ("legal", "Legal"),
                            ("financial", "Financial"),
                            ("content-management", "Content management"),
                        ],
                        db_index=True,
                        max_length=32,
                    ),
                ),
                (
                    "preferred_contact_method",
                    models.CharField(choices=[("email", "Email"), ("phone", "Phone")], default="email", max_length=10),
                ),
                ("socials", models.CharField(blank=True, default="", max_length=500)),
                ("portfolio_url", models.URLField(blank=True, default="")),
                ("preferred_genre", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-created_at"]},
        ),
    ]
