"""
API tests for tiers, seating charts and seat reads

Test Coverage:
1. Tier creation, validation and availability
2. Chart registration and the seat map
3. Health and metrics endpoints
"""

from fastapi.testclient import TestClient
import pytest
from uuid_utils.compat import uuid7


pytestmark = pytest.mark.api


def _create_tier(client: TestClient, event_id: str, **overrides) -> dict:
    payload = {'event_id': event_id, 'name': 'General Admission', 'price': 2500, 'quantity': 10}
    response = client.post('/api/inventory/tier', json=payload | overrides)
    assert response.status_code == 201, response.text
    return response.json()


def _register_chart(client: TestClient, event_id: str) -> dict:
    response = client.post(
        '/api/inventory/chart',
        json={
            'event_id': event_id,
            'chart_id': 'main-floor',
            'sections': [
                {
                    'section_id': 'A',
                    'price': 4000,
                    'containers': [
                        {'container_id': '1', 'seats': [{'seat_id': '1'}, {'seat_id': '2'}]},
                        {
                            'container_id': 'T5',
                            'container_type': 'table',
                            'seats': [{'seat_id': '1'}, {'seat_id': '2', 'blocked': True}],
                        },
                    ],
                }
            ],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestTierApi:
    def test_create_tier(self, client: TestClient):
        # Given
        event_id = str(uuid7())

        # When
        tier = _create_tier(client, event_id)

        # Then
        assert tier['event_id'] == event_id
        assert (tier['quantity'], tier['sold'], tier['held'], tier['staff_reserved']) == (10, 0, 0, 0)

    def test_create_tier_with_negative_price(self, client: TestClient):
        response = client.post(
            '/api/inventory/tier',
            json={'event_id': str(uuid7()), 'name': 'GA', 'price': -1, 'quantity': 10},
        )

        assert response.status_code == 400

    def test_availability(self, client: TestClient):
        tier = _create_tier(client, str(uuid7()), quantity=5)

        response = client.get(f'/api/inventory/tier/{tier["id"]}/availability')

        assert response.status_code == 200
        body = response.json()
        assert body['available'] == 5
        assert body['public_available'] == 5

    def test_availability_of_unknown_tier(self, client: TestClient):
        response = client.get(f'/api/inventory/tier/{uuid7()}/availability')

        assert response.status_code == 404
        assert response.json() == {'detail': 'Ticket tier not found'}

    def test_delete_unused_tier(self, client: TestClient):
        tier = _create_tier(client, str(uuid7()))

        response = client.delete(f'/api/inventory/tier/{tier["id"]}')

        assert response.status_code == 204
        assert client.get(f'/api/inventory/tier/{tier["id"]}/availability').status_code == 404


class TestSeatingChartApi:
    def test_register_chart(self, client: TestClient):
        event_id = str(uuid7())

        body = _register_chart(client, event_id)

        assert body == {'event_id': event_id, 'chart_id': 'main-floor', 'seat_count': 4}

    def test_seat_status(self, client: TestClient):
        event_id = str(uuid7())
        _register_chart(client, event_id)

        blocked = client.get(
            f'/api/inventory/event/{event_id}/seat',
            params={'section_id': 'A', 'row_id': 'T5', 'seat_id': '2'},
        )
        unknown = client.get(
            f'/api/inventory/event/{event_id}/seat',
            params={'section_id': 'A', 'row_id': '9', 'seat_id': '9'},
        )

        assert blocked.json()['status'] == 'blocked'
        assert unknown.status_code == 404

    def test_list_section_seats(self, client: TestClient):
        event_id = str(uuid7())
        _register_chart(client, event_id)

        response = client.get(f'/api/inventory/event/{event_id}/section/A/seats')

        assert response.status_code == 200
        body = response.json()
        assert body['total'] == 4
        assert body['totals']['available'] == 3
        assert body['totals']['blocked'] == 1

    def test_delete_chart(self, client: TestClient):
        event_id = str(uuid7())
        _register_chart(client, event_id)

        response = client.delete(f'/api/inventory/chart/{event_id}/main-floor')

        assert response.status_code == 204


class TestCommonEndpoints:
    def test_health(self, client: TestClient):
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_metrics(self, client: TestClient):
        response = client.get('/metrics')

        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/plain')
