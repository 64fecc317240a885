"""
Stock service for putting returned goods back into inventory.
"""
import copy
import logging
from typing import Dict, Optional

from apps.common.exceptions import CollaboratorFailure
from ..models import Product

logger = logging.getLogger(__name__)


class StockService:
    """Inventory counters at whole-product or selected-option level"""

    @staticmethod
    def restock(product_slug: str, quantity: int, selected_options: Optional[Dict[str, str]] = None) -> Optional[Product]:
        """
        Increase stock for a returned line and recompute ``in_stock``.

        Products with variations are restocked on every option named in
        ``selected_options``; plain products on the whole-product counter.
        Must run inside the caller's transaction: a failure here aborts the
        whole return completion.
        """
        if quantity < 0:
            raise CollaboratorFailure("Restock quantity must not be negative", product=product_slug)
        if quantity == 0:
            return None

        try:
            product = Product.objects.select_for_update().get(slug=product_slug)
        except Product.DoesNotExist:
            raise CollaboratorFailure(
                f"Cannot restock unknown product {product_slug}",
                product=product_slug,
            )

        selected_options = selected_options or {}

        if product.has_variations and selected_options:
            variations = copy.deepcopy(product.variations)
            touched = 0
            for variation in variations:
                selected_value = selected_options.get(variation.get('name'))
                if not selected_value:
                    continue
                for option in variation.get('options', []):
                    if option.get('value') == selected_value:
                        option['stock_quantity'] = int(option.get('stock_quantity') or 0) + quantity
                        option['in_stock'] = option['stock_quantity'] > 0
                        touched += 1
            if not touched:
                raise CollaboratorFailure(
                    f"No stock option of {product_slug} matches {selected_options}",
                    product=product_slug,
                )
            product.variations = variations
            product.in_stock = any(
                option.get('in_stock') for variation in variations for option in variation.get('options', [])
            )
            product.save(update_fields=['variations', 'in_stock', 'update_time'])
        else:
            product.stock_quantity = int(product.stock_quantity or 0) + quantity
            product.in_stock = product.stock_quantity > 0
            product.save(update_fields=['stock_quantity', 'in_stock', 'update_time'])

        logger.info(f"Restocked {quantity} x {product_slug} {selected_options or ''}".rstrip())
        return product
