"""
API tests for holds, payment callbacks and the operations on issued tickets

Test Coverage:
1. Hold create / get / confirm / cancel over HTTP
2. Actor identity is required on every mutation
3. Payment callback confirms or releases by payment reference
4. Ticket scan, void, transfer and claim
5. Staff allocation and cash sale, guest import, waitlist
"""

from typing import Callable

from fastapi.testclient import TestClient
import pytest
from uuid_utils.compat import uuid7


pytestmark = pytest.mark.api


@pytest.fixture
def event_id() -> str:
    return str(uuid7())


@pytest.fixture
def tier(client: TestClient, event_id: str) -> dict:
    response = client.post(
        '/api/inventory/tier',
        json={'event_id': event_id, 'name': 'General Admission', 'price': 2500, 'quantity': 4},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def hold(client: TestClient, event_id: str, tier: dict, actor: Callable) -> dict:
    response = client.post(
        '/api/hold',
        json={'event_id': event_id, 'actor': actor(), 'tier_id': tier['id'], 'quantity': 2},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def ticket(client: TestClient, hold: dict, actor: Callable) -> dict:
    response = client.post(
        f'/api/hold/{hold["id"]}/confirm', json={'actor': actor(), 'order_id': 'ord_1'}
    )
    assert response.status_code == 200, response.text
    return response.json()['tickets'][0]


class TestHoldApi:
    def test_create_hold(self, hold: dict, tier: dict):
        assert hold['status'] == 'active'
        assert (hold['actor_kind'], hold['actor_id']) == ('buyer_session', 'sess_1')
        assert hold['items'] == [
            {
                'kind': 'tier',
                'quantity': 2,
                'tier_id': tier['id'],
                'seat_id': None,
                'seat_label': None,
            }
        ]

    def test_create_hold_without_actor(self, client: TestClient, event_id: str, tier: dict):
        response = client.post(
            '/api/hold', json={'event_id': event_id, 'tier_id': tier['id'], 'quantity': 1}
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'Actor identity is required'}

    def test_create_hold_with_unknown_actor_kind(
        self, client: TestClient, event_id: str, tier: dict, actor: Callable
    ):
        response = client.post(
            '/api/hold',
            json={'event_id': event_id, 'actor': actor(kind='robot'), 'tier_id': tier['id']},
        )

        assert response.status_code == 400
        assert 'robot' in response.json()['detail']

    def test_create_hold_beyond_capacity(
        self, client: TestClient, event_id: str, tier: dict, actor: Callable
    ):
        response = client.post(
            '/api/hold',
            json={'event_id': event_id, 'actor': actor(), 'tier_id': tier['id'], 'quantity': 5},
        )

        assert response.status_code == 409
        assert response.json()['detail'].startswith('Not enough tickets available')

    def test_get_hold(self, client: TestClient, hold: dict):
        response = client.get(f'/api/hold/{hold["id"]}')

        assert response.status_code == 200
        assert response.json()['id'] == hold['id']

    def test_get_unknown_hold(self, client: TestClient):
        response = client.get(f'/api/hold/{uuid7()}')

        assert response.status_code == 404
        assert response.json() == {'detail': 'Hold not found'}

    def test_confirm_hold(self, client: TestClient, hold: dict, actor: Callable):
        # When
        response = client.post(
            f'/api/hold/{hold["id"]}/confirm', json={'actor': actor(), 'order_id': 'ord_1'}
        )

        # Then
        assert response.status_code == 200
        tickets = response.json()['tickets']
        assert len(tickets) == 2
        assert all(t['status'] == 'valid' and t['order_id'] == 'ord_1' for t in tickets)
        view = client.get(f'/api/hold/{hold["id"]}').json()
        assert view['status'] == 'confirmed'
        assert len(view['tickets']) == 2

    def test_confirm_without_actor(self, client: TestClient, hold: dict):
        response = client.post(f'/api/hold/{hold["id"]}/confirm', json={'order_id': 'ord_1'})

        assert response.status_code == 400

    def test_cancel_hold(self, client: TestClient, hold: dict, tier: dict, actor: Callable):
        response = client.post(f'/api/hold/{hold["id"]}/cancel', json={'actor': actor()})

        assert response.status_code == 200
        assert response.json()['status'] == 'cancelled'
        availability = client.get(f'/api/inventory/tier/{tier["id"]}/availability').json()
        assert availability['available'] == 4

    def test_sweep(self, client: TestClient, hold: dict):
        response = client.post('/api/hold/sweep', json={})

        assert response.status_code == 200
        assert response.json() == {'expired': 0}


class TestPaymentCallbackApi:
    def test_succeeded_payment_confirms_the_hold(
        self, client: TestClient, event_id: str, tier: dict, actor: Callable
    ):
        # Given
        client.post(
            '/api/hold',
            json={
                'event_id': event_id,
                'actor': actor(),
                'tier_id': tier['id'],
                'payment_ref': 'pi_3Nk2',
            },
        )

        # When
        response = client.post(
            '/api/payment/callback',
            json={'payment_ref': 'pi_3Nk2', 'outcome': 'succeeded', 'order_id': 'ord_7'},
        )

        # Then
        assert response.status_code == 200
        tickets = response.json()['tickets']
        assert len(tickets) == 1
        assert tickets[0]['order_id'] == 'ord_7'

    def test_failed_payment_releases_the_hold(
        self, client: TestClient, event_id: str, tier: dict, actor: Callable
    ):
        client.post(
            '/api/hold',
            json={
                'event_id': event_id,
                'actor': actor(),
                'tier_id': tier['id'],
                'quantity': 4,
                'payment_ref': 'pi_fail',
            },
        )

        response = client.post(
            '/api/payment/callback', json={'payment_ref': 'pi_fail', 'outcome': 'failed'}
        )

        assert response.json()['hold_status'] == 'cancelled'
        availability = client.get(f'/api/inventory/tier/{tier["id"]}/availability').json()
        assert availability['available'] == 4

    def test_unknown_outcome_is_rejected(self, client: TestClient):
        response = client.post(
            '/api/payment/callback', json={'payment_ref': 'pi_1', 'outcome': 'maybe'}
        )

        assert response.status_code == 400


class TestTicketApi:
    def test_scan_admits_once(self, client: TestClient, ticket: dict, actor: Callable):
        door = actor(kind='staff', id='door-1')

        first = client.post('/api/ticket/scan', json={'code': ticket['code'], 'actor': door})
        second = client.post('/api/ticket/scan', json={'code': ticket['code'], 'actor': door})

        assert first.json()['status'] == 'used'
        assert second.status_code == 400

    def test_void(self, client: TestClient, ticket: dict, tier: dict, actor: Callable):
        response = client.post(
            f'/api/ticket/{ticket["id"]}/void',
            json={'actor': actor(kind='staff', id='org-1'), 'reason': 'refund'},
        )

        assert response.json()['status'] == 'void'
        availability = client.get(f'/api/inventory/tier/{tier["id"]}/availability').json()
        assert availability['sold'] == 1

    def test_transfer(self, client: TestClient, ticket: dict, actor: Callable):
        response = client.post(
            f'/api/ticket/{ticket["id"]}/transfer',
            json={'actor': actor(), 'recipient_name': 'Friend'},
        )

        assert response.status_code == 200
        body = response.json()
        assert body['transferred_from_id'] == ticket['id']
        assert body['code'] != ticket['code']

    def test_claim(self, client: TestClient, ticket: dict, actor: Callable):
        response = client.post(
            '/api/ticket/claim',
            json={'code': ticket['code'], 'actor': actor(kind='buyer_session', id='user_1')},
        )

        assert response.json()['attendee_id'] == 'user_1'


class TestStaffApi:
    def test_allocation_and_cash_sale(self, client: TestClient, tier: dict, actor: Callable):
        # Given
        allocation = client.post(
            '/api/staff/allocation',
            json={
                'tier_id': tier['id'],
                'staff_user_id': 'promoter-17',
                'allocated_tickets': 2,
                'commission_value': '10',
                'actor': actor(kind='staff', id='organizer-1'),
            },
        ).json()

        # When
        response = client.post(
            f'/api/staff/allocation/{allocation["id"]}/sale',
            json={'quantity': 2, 'actor': actor(kind='staff', id='promoter-17')},
        )

        # Then
        assert response.status_code == 201, response.text
        body = response.json()
        assert (body['ticket_count'], body['total_amount'], body['commission_amount']) == (
            2,
            5000,
            500,
        )
        stored = client.get(f'/api/staff/allocation/{allocation["id"]}').json()
        assert stored['remaining'] == 0

    def test_sale_by_another_staff_member(
        self, client: TestClient, tier: dict, actor: Callable
    ):
        allocation = client.post(
            '/api/staff/allocation',
            json={
                'tier_id': tier['id'],
                'staff_user_id': 'promoter-17',
                'allocated_tickets': 1,
                'actor': actor(kind='staff', id='organizer-1'),
            },
        ).json()

        response = client.post(
            f'/api/staff/allocation/{allocation["id"]}/sale',
            json={'quantity': 1, 'actor': actor(kind='staff', id='promoter-99')},
        )

        assert response.status_code == 403


class TestGuestImportAndWaitlistApi:
    def test_guest_import_report(
        self, client: TestClient, event_id: str, tier: dict, actor: Callable
    ):
        response = client.post(
            '/api/guest_import',
            json={
                'event_id': event_id,
                'actor': actor(kind='guest_import', id='vip-list'),
                'rows': [
                    {'attendee_name': 'Sam Ortiz', 'tier_id': tier['id']},
                    {'attendee_name': 'Ari Chen', 'tier_id': tier['id'], 'quantity': 9},
                ],
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert (body['imported'], body['failed']) == (1, 1)
        assert body['rows'][1]['error'].startswith('Not enough tickets available')

    def test_join_waitlist(self, client: TestClient, tier: dict, actor: Callable):
        first = client.post(
            '/api/waitlist', json={'tier_id': tier['id'], 'actor': actor(id='sess_1')}
        )
        second = client.post(
            '/api/waitlist', json={'tier_id': tier['id'], 'actor': actor(id='sess_2')}
        )

        assert first.status_code == 201
        assert (first.json()['position'], second.json()['position']) == (1, 2)

    def test_promote_empty_waitlist(self, client: TestClient, tier: dict, actor: Callable):
        response = client.post(
            '/api/waitlist/promote',
            json={'tier_id': tier['id'], 'actor': actor(kind='staff', id='organizer-1')},
        )

        assert response.json() == {'promoted': False, 'entry': None, 'hold_expires_at': None}
