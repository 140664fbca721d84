from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("receipts", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="receipt",
            name="order_date",
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
