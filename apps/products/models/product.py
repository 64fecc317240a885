from django.db import models


class Product(models.Model):
    """Catalog product as far as order lines and stock keeping need it"""
    slug = models.SlugField(max_length=200, unique=True, help_text="Stable product reference used by order lines")
    name = models.CharField(max_length=200)
    price_cents = models.IntegerField(default=0, help_text="Current unit price in cents")

    # Whole-product stock, used when the product has no variations
    stock_quantity = models.IntegerField(default=0)
    in_stock = models.BooleanField(default=False)

    # Option-level stock: [{"name": "Größe", "options": [{"value": "M", "stock_quantity": 3, "in_stock": true}]}]
    variations = models.JSONField(default=list, blank=True)

    create_time = models.DateTimeField(auto_now_add=True)
    update_time = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'products'

    def __str__(self):
        return f"{self.name} ({self.slug})"

    @property
    def has_variations(self):
        return bool(self.variations)

    def find_option(self, variation_name, value):
        """Return the option dict for ``variation_name == value`` or None"""
        for variation in self.variations or []:
            if variation.get('name') != variation_name:
                continue
            for option in variation.get('options', []):
                if option.get('value') == value:
                    return option
        return None
