"""
Tests for restocking returned goods.
"""
import pytest

from apps.common.exceptions import CollaboratorFailure
from apps.products.services import StockService
from tests.factories import ProductFactory


def sized_variations(m_stock=0, l_stock=2):
    return [{
        'name': 'Size',
        'options': [
            {'value': 'M', 'stock_quantity': m_stock, 'in_stock': m_stock > 0},
            {'value': 'L', 'stock_quantity': l_stock, 'in_stock': l_stock > 0},
        ],
    }]


@pytest.mark.django_db
class TestRestock:

    def test_whole_product_counter(self):
        ProductFactory(slug='mug', stock_quantity=0, in_stock=False)

        product = StockService.restock('mug', 3)

        assert product.stock_quantity == 3
        assert product.in_stock is True

    def test_selected_option_counter(self):
        ProductFactory(slug='shirt', variations=sized_variations())

        product = StockService.restock('shirt', 2, {'Size': 'M'})

        assert product.find_option('Size', 'M') == {'value': 'M', 'stock_quantity': 2, 'in_stock': True}
        assert product.find_option('Size', 'L')['stock_quantity'] == 2
        assert product.stock_quantity == 0

    def test_zero_quantity_is_a_no_op(self):
        assert StockService.restock('anything', 0) is None

    def test_unknown_product(self):
        with pytest.raises(CollaboratorFailure):
            StockService.restock('missing', 1)

    def test_unknown_option(self):
        ProductFactory(slug='shirt', variations=sized_variations())
        with pytest.raises(CollaboratorFailure):
            StockService.restock('shirt', 1, {'Size': 'XXL'})
