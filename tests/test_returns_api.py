"""
Tests for the return HTTP API.
"""
import pytest

from apps.returns.models import ReturnRequest
from apps.returns.services import ReturnCompletionService, ReturnService
from tests.factories import UserFactory, create_order


@pytest.mark.django_db
class TestCustomerReturnsAPI:

    def test_create_return(self, customer_client, two_line_order):
        response = customer_client.post('/api/returns/', {
            'orderNumber': two_line_order.order_number,
            'items': [{'lineNo': 1, 'quantity': 1}],
            'notes': 'Wrong colour',
        }, format='json')

        assert response.status_code == 201
        data = response.json()['data']
        assert data['status'] == 'pending'
        assert data['orderNumber'] == two_line_order.order_number
        assert data['items'][0]['lineNo'] == 1
        assert data['frozenPoints'] == 35

    def test_create_requires_items(self, customer_client, two_line_order):
        response = customer_client.post('/api/returns/', {
            'orderNumber': two_line_order.order_number,
            'items': [],
        }, format='json')

        assert response.status_code == 400
        assert 'items' in response.json()['errors']

    def test_domain_errors_use_error_envelope(self, customer_client, two_line_order):
        response = customer_client.post('/api/returns/', {
            'orderNumber': two_line_order.order_number,
            'items': [{'lineNo': 9, 'quantity': 1}],
        }, format='json')

        assert response.status_code == 400
        body = response.json()
        assert body['code'] == 400
        assert body['msg'] == 'Unknown order line'

    def test_unknown_order_is_404(self, customer_client):
        response = customer_client.post('/api/returns/', {
            'orderNumber': 'ORD-NOPE',
            'items': [{'lineNo': 1, 'quantity': 1}],
        }, format='json')

        assert response.status_code == 404

    def test_availability(self, customer_client, two_line_order):
        response = customer_client.get('/api/returns/availability/', {'orderNumber': two_line_order.order_number})

        assert response.status_code == 200
        data = response.json()['data']
        assert data['hasReturnableItems'] is True
        assert [line['availableQuantity'] for line in data['items']] == [2, 1]

    def test_availability_requires_order_number(self, customer_client):
        assert customer_client.get('/api/returns/availability/').status_code == 400

    def test_my_returns(self, customer_client, customer, two_line_order):
        ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 2, 'quantity': 1}])
        other_order_owner = UserFactory()

        response = customer_client.get('/api/returns/mine/')

        assert response.status_code == 200
        assert len(response.json()['data']) == 1
        assert not ReturnRequest.objects.filter(user=other_order_owner).exists()

    def test_anonymous_is_rejected(self, api_client):
        assert api_client.get('/api/returns/mine/').status_code == 401


@pytest.mark.django_db
class TestAdminReturnsAPI:

    @pytest.fixture
    def return_request(self, customer, two_line_order):
        return ReturnService.create_return(
            customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 2}, {'lineNo': 2, 'quantity': 1}]
        )

    def test_customer_cannot_use_admin_api(self, customer_client, return_request):
        assert customer_client.get(f'/api/admin/returns/{return_request.pk}/').status_code == 403

    def test_detail(self, staff_client, return_request):
        response = staff_client.get(f'/api/admin/returns/{return_request.pk}/')

        assert response.status_code == 200
        assert len(response.json()['data']['items']) == 2

    def test_complete_defaults_refund_to_calculated_total(self, staff_client, return_request):
        response = staff_client.patch(f'/api/admin/returns/{return_request.pk}/', {
            'items': [{'lineNo': 1, 'accepted': True}, {'lineNo': 2, 'accepted': True}],
            'status': 'completed',
            'refund': {'method': 'bank', 'reference': 'SEPA-1'},
        }, format='json')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['status'] == 'completed'
        assert data['isFullReturn'] is True
        assert data['refund'] == {'method': 'bank', 'reference': 'SEPA-1', 'amountCents': 5495}

    def test_invalid_status(self, staff_client, return_request):
        response = staff_client.patch(f'/api/admin/returns/{return_request.pk}/', {'status': 'shipped'}, format='json')
        assert response.status_code == 400

    def test_refund_preview_does_not_mutate(self, staff_client, return_request):
        staff_client.patch(f'/api/admin/returns/{return_request.pk}/', {
            'items': [{'lineNo': 2, 'accepted': True}],
            'status': 'processing',
        }, format='json')

        response = staff_client.get(f'/api/admin/returns/{return_request.pk}/refund-preview/')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['itemsRefundCents'] == 3000
        assert data['isFullReturn'] is False
        return_request.refresh_from_db()
        assert return_request.status == ReturnRequest.STATUS_PROCESSING
        assert return_request.items_refund_cents is None

    def test_credit_note(self, staff_client, return_request):
        staff_client.patch(f'/api/admin/returns/{return_request.pk}/', {
            'items': [{'lineNo': 1, 'accepted': True, 'quantity': 1}],
            'status': 'completed',
        }, format='json')

        response = staff_client.get(f'/api/admin/returns/{return_request.pk}/credit-note/')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['totalCents'] == 1000
        assert data['lines'][0]['quantity'] == 1

    def test_credit_note_of_open_return_is_404(self, staff_client, return_request):
        response = staff_client.get(f'/api/admin/returns/{return_request.pk}/credit-note/')
        assert response.status_code == 404

    def test_unknown_return_is_404(self, staff_client):
        assert staff_client.get('/api/admin/returns/999999/').status_code == 404


@pytest.mark.django_db
class TestAdminReturnListAPI:

    @pytest.fixture
    def returns(self, customer, two_line_order):
        first = ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 1, 'quantity': 1}])
        second = ReturnService.create_return(customer, two_line_order.order_number, [{'lineNo': 2, 'quantity': 1}])
        ReturnCompletionService.process_update(second.pk, status='rejected')

        other_customer = UserFactory()
        other_order = create_order(user=other_customer, lines=[('mug', 1500, 1)])
        third = ReturnService.create_return(other_customer, other_order.order_number, [{'lineNo': 1, 'quantity': 1}])
        return first, second, third

    def test_newest_first(self, staff_client, returns):
        response = staff_client.get('/api/admin/returns/')

        assert response.status_code == 200
        data = response.json()['data']
        assert [entry['id'] for entry in data['list']] == [r.pk for r in reversed(returns)]
        assert data['page'] == {'pageNum': 1, 'pageSize': 20, 'total': 3, 'totalPages': 1}

    def test_filter_by_status(self, staff_client, returns):
        first, second, third = returns

        response = staff_client.get('/api/admin/returns/', {'status': 'pending'})

        assert [entry['id'] for entry in response.json()['data']['list']] == [third.pk, first.pk]

    def test_filter_by_user(self, staff_client, customer, returns):
        first, second, third = returns

        response = staff_client.get('/api/admin/returns/', {'user': customer.pk})

        ids = [entry['id'] for entry in response.json()['data']['list']]
        assert ids == [second.pk, first.pk]

    def test_page_and_limit(self, staff_client, returns):
        response = staff_client.get('/api/admin/returns/', {'page': 2, 'limit': 2})

        data = response.json()['data']
        assert [entry['id'] for entry in data['list']] == [returns[0].pk]
        assert data['page'] == {'pageNum': 2, 'pageSize': 2, 'total': 3, 'totalPages': 2}

    def test_invalid_filters(self, staff_client, returns):
        assert staff_client.get('/api/admin/returns/', {'status': 'shipped'}).status_code == 400
        assert staff_client.get('/api/admin/returns/', {'user': 'abc'}).status_code == 400

    def test_customer_cannot_list(self, customer_client, returns):
        assert customer_client.get('/api/admin/returns/').status_code == 403
