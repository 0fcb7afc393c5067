from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("medicine_name", models.CharField(db_index=True, max_length=255)),
                ("batch_number", models.CharField(max_length=100)),
                ("quantity_on_hand", models.PositiveIntegerField(default=0)),
                ("cost_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("sale_price", models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ("expiration_date", models.DateField(blank=True, null=True)),
                ("supplier", models.CharField(blank=True, default="", max_length=255)),
                ("reorder_level", models.PositiveIntegerField(default=10)),
            ],
            options={
                "verbose_name": "Inventory Item",
                "verbose_name_plural": "Inventory Items",
                "db_table": "medicine_inventory",
                "ordering": ["medicine_name", "id"],
            },
        ),
    ]
