"""
Test configuration for the shop server.
"""
import pytest
from rest_framework.test import APIClient


@pytest.fixture
def customer():
    from tests.factories import UserFactory
    return UserFactory(bonus_points=0)


@pytest.fixture
def staff_user():
    from tests.factories import StaffUserFactory
    return StaffUserFactory()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer_client(api_client, customer):
    api_client.force_authenticate(user=customer)
    return api_client


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def two_line_order(customer):
    """3 units over 2 lines with shipping, points still pending"""
    from tests.factories import create_order
    return create_order(
        user=customer,
        lines=[('shirt', 1000, 2), ('cap', 3000, 1)],
        shipping_cost_cents=495,
    )
