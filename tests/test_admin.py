"""
Tests for the admin console endpoints
"""

import pytest

from jerseystore.models import db, Jersey, CartItem, JerseyRequest, Order, OrderItem, AdminSettings
from jerseystore.utils.inquiries import submit_jersey_request, create_jersey_inquiry
from conftest import login

pytestmark = pytest.mark.timeout(30)

NEW_JERSEY = {
    'name': 'Home Kit 2024/25',
    'team': 'Real Madrid',
    'league': 'La Liga',
    'season': '2024/25',
    'price': '30000',
    'stock_quantity': 5,
    'sizes': 'S, M, L',
    'available_sizes': 'M, L',
    'is_featured': True
}

REQUEST_FORM = {
    'full_name': 'Tunde Bakare',
    'email': 'tunde@example.com',
    'phone_number': '08031234567',
    'jersey_name': 'Retro 1999 Home',
    'team': 'Barcelona',
    'size': 'XL'
}


@pytest.fixture
def jersey_request(db_session):
    jersey_request, _ = submit_jersey_request(REQUEST_FORM)
    return jersey_request


@pytest.fixture
def order(test_user, jersey):
    order, _ = create_jersey_inquiry(jersey, 'M', 1, user=test_user)
    return order


class TestAccessControl:

    def test_anonymous(self, client, db_session):
        assert client.get('/admin/jerseys').status_code == 401

    def test_customer(self, auth_client):
        response = auth_client.get('/admin/requests')
        assert response.status_code == 403
        assert response.get_json()['error'] == "You don't have admin privileges."

    def test_profile_flag_grants_admin(self, client, test_user, db_session):
        test_user.profile.is_admin = True
        db_session.commit()
        login(client, test_user.email)
        assert client.get('/admin/orders').status_code == 200


class TestJerseyManagement:

    def test_create(self, admin_client):
        response = admin_client.post('/admin/jerseys', json=NEW_JERSEY)
        assert response.status_code == 201
        jersey = response.get_json()['jersey']
        assert jersey['price'] == 30000.0
        assert jersey['sizes'] == ['S', 'M', 'L']
        assert jersey['available_sizes'] == ['M', 'L']
        assert jersey['is_available'] is True
        assert jersey['is_featured'] is True

    def test_create_defaults_sizes(self, admin_client):
        data = {k: v for k, v in NEW_JERSEY.items() if k not in ('sizes', 'available_sizes')}
        jersey = admin_client.post('/admin/jerseys', json=data).get_json()['jersey']
        assert jersey['sizes'] == ['S', 'M', 'L', 'XL', 'XXL']
        assert jersey['available_sizes'] == jersey['sizes']

    def test_create_invalid(self, admin_client):
        response = admin_client.post('/admin/jerseys', json=dict(NEW_JERSEY, price='free', team=''))
        assert response.status_code == 400
        assert set(response.get_json()['errors']) == {'price', 'team'}
        assert Jersey.query.count() == 0

    def test_patch_availability(self, admin_client, jersey):
        response = admin_client.patch(f'/admin/jerseys/{jersey.id}', json={'is_available': False})
        assert response.status_code == 200
        assert response.get_json()['jersey']['is_available'] is False

    def test_patch_available_sizes_checked_against_stored_sizes(self, admin_client, jersey):
        response = admin_client.patch(f'/admin/jerseys/{jersey.id}', json={'available_sizes': 'M, XXL'})
        assert response.status_code == 400

    def test_put_replaces(self, admin_client, jersey):
        response = admin_client.put(f'/admin/jerseys/{jersey.id}', json=dict(NEW_JERSEY, price='27500'))
        assert response.status_code == 200
        data = response.get_json()['jersey']
        assert data['team'] == 'Real Madrid'
        assert data['price'] == 27500.0

    def test_delete_removes_cart_rows(self, admin_client, test_user, jersey):
        db.session.add(CartItem(user_id=test_user.id, jersey_id=jersey.id, size='M', quantity=1))
        db.session.commit()
        jersey_id = jersey.id

        response = admin_client.delete(f'/admin/jerseys/{jersey_id}')
        assert response.status_code == 200
        assert db.session.get(Jersey, jersey_id) is None
        assert CartItem.query.count() == 0

    def test_delete_refused_while_ordered(self, admin_client, order, jersey):
        jersey_id = jersey.id
        response = admin_client.delete(f'/admin/jerseys/{jersey_id}')
        assert response.status_code == 409
        assert 'unavailable' in response.get_json()['error']
        assert db.session.get(Jersey, jersey_id) is not None
        assert OrderItem.query.filter_by(jersey_id=jersey_id).count() == 1
        assert admin_client.get('/admin/orders').status_code == 200

    def test_missing_jersey(self, admin_client):
        assert admin_client.delete('/admin/jerseys/9999').status_code == 404


class TestRequestWorkflow:

    def test_list_with_actions(self, admin_client, jersey_request):
        data = admin_client.get('/admin/requests').get_json()
        assert len(data['requests']) == 1
        assert set(data['requests'][0]['allowed_transitions']) == {'approved', 'rejected'}

    def test_status_filter(self, admin_client, jersey_request):
        assert admin_client.get('/admin/requests?status=approved').get_json()['requests'] == []
        assert len(admin_client.get('/admin/requests?status=pending').get_json()['requests']) == 1
        assert admin_client.get('/admin/requests?status=bogus').status_code == 400

    def test_approve_then_fulfil(self, admin_client, jersey_request):
        url = f'/admin/requests/{jersey_request.id}/status'
        response = admin_client.post(url, json={'status': 'approved', 'admin_response': 'We can get it in 2 weeks'})
        assert response.status_code == 200
        data = response.get_json()['request']
        assert data['status'] == 'approved'
        assert data['admin_response'] == 'We can get it in 2 weeks'
        assert data['allowed_transitions'] == ['fulfilled']

        response = admin_client.post(url, json={'status': 'fulfilled'})
        assert response.status_code == 200
        assert db.session.get(JerseyRequest, jersey_request.id).status == 'fulfilled'

    def test_disallowed_move(self, admin_client, jersey_request):
        response = admin_client.post(f'/admin/requests/{jersey_request.id}/status', json={'status': 'fulfilled'})
        assert response.status_code == 409
        assert db.session.get(JerseyRequest, jersey_request.id).status == 'pending'

    def test_unknown_status(self, admin_client, jersey_request):
        response = admin_client.post(f'/admin/requests/{jersey_request.id}/status', json={'status': 'shipped'})
        assert response.status_code == 400

    def test_response_without_status_change(self, admin_client, jersey_request):
        response = admin_client.patch(f'/admin/requests/{jersey_request.id}',
                                      json={'admin_response': 'Checking with the supplier'})
        assert response.status_code == 200
        data = response.get_json()['request']
        assert data['status'] == 'pending'
        assert data['admin_response'] == 'Checking with the supplier'

    def test_response_on_closed_request(self, admin_client, jersey_request):
        url = f'/admin/requests/{jersey_request.id}'
        assert admin_client.patch(url, json={'status': 'rejected'}).status_code == 200

        response = admin_client.patch(url, json={'admin_response': 'Sorry, sold out everywhere'})
        assert response.status_code == 200
        saved = db.session.get(JerseyRequest, jersey_request.id)
        assert saved.status == 'rejected'
        assert saved.admin_response == 'Sorry, sold out everywhere'

    def test_contact_customer(self, admin_client, jersey_request):
        response = admin_client.post(f'/admin/requests/{jersey_request.id}/contact', json={})
        assert response.status_code == 200
        data = response.get_json()
        assert data['whatsapp_url'].startswith('https://wa.me?phone=23408031234567&text=')
        assert data['request']['whatsapp_contacted'] is True


class TestOrderWorkflow:

    def test_list(self, admin_client, order):
        orders = admin_client.get('/admin/orders').get_json()['orders']
        assert [o['order_number'] for o in orders] == [order.order_number]
        assert orders[0]['customer_name'] == 'Ada Obi'

    def test_approve_with_quote(self, admin_client, order):
        response = admin_client.post(f'/admin/orders/{order.id}/status', json={
            'status': 'approved', 'quoted_price': '27000', 'admin_notes': 'Includes delivery'
        })
        assert response.status_code == 200
        data = response.get_json()['order']
        assert data['status'] == 'approved'
        assert data['quoted_price'] == 27000.0
        assert data['admin_notes'] == 'Includes delivery'

    def test_invalid_quote(self, admin_client, order):
        response = admin_client.post(f'/admin/orders/{order.id}/status',
                                     json={'status': 'approved', 'quoted_price': 'lots'})
        assert response.status_code == 400
        assert db.session.get(Order, order.id).status == 'pending'

    def test_rejected_is_final(self, admin_client, order):
        url = f'/admin/orders/{order.id}/status'
        assert admin_client.post(url, json={'status': 'rejected'}).status_code == 200
        assert admin_client.post(url, json={'status': 'approved'}).status_code == 409

    def test_quote_without_status_change(self, admin_client, order):
        response = admin_client.patch(f'/admin/orders/{order.id}', json={'quoted_price': 30000})
        assert response.status_code == 200
        data = response.get_json()['order']
        assert data['status'] == 'pending'
        assert data['quoted_price'] == 30000.0

    def test_same_status_is_accepted(self, admin_client, order):
        response = admin_client.post(f'/admin/orders/{order.id}/status',
                                     json={'status': 'pending', 'quoted_price': '26000'})
        assert response.status_code == 200
        assert response.get_json()['order']['quoted_price'] == 26000.0

    def test_notes_on_fulfilled_order(self, admin_client, order):
        url = f'/admin/orders/{order.id}'
        assert admin_client.patch(url, json={'status': 'approved'}).status_code == 200
        assert admin_client.patch(url, json={'status': 'fulfilled'}).status_code == 200

        response = admin_client.patch(url, json={'admin_notes': 'Delivered to Ikeja'})
        assert response.status_code == 200
        assert db.session.get(Order, order.id).admin_notes == 'Delivered to Ikeja'

    def test_contact_with_message(self, admin_client, order):
        response = admin_client.post(f'/admin/orders/{order.id}/contact', json={'message': 'Ready for pickup'})
        assert response.status_code == 200
        assert response.get_json()['whatsapp_url'].endswith('&text=Ready%20for%20pickup')


class TestSettings:

    def test_defaults_before_save(self, admin_client):
        settings = admin_client.get('/admin/settings').get_json()['settings']
        assert settings['whatsapp_business_number'] == '2348012345678'
        assert settings['business_hours']['sunday'] == {'closed': True}
        assert AdminSettings.query.count() == 0

    def test_update(self, admin_client):
        response = admin_client.put('/admin/settings', json={
            'whatsapp_business_number': '+234 909 999 9999',
            'message_templates': {'greeting': 'Welcome!'},
            'notification_email': 'Owner@Example.com'
        })
        assert response.status_code == 200
        settings = response.get_json()['settings']
        assert settings['whatsapp_business_number'] == '2349099999999'
        assert settings['notification_email'] == 'owner@example.com'
        assert AdminSettings.query.count() == 1

        contact = admin_client.get('/api/contact').get_json()
        assert contact['whatsapp_url'] == 'https://wa.me?phone=2349099999999&text=Welcome!'

    def test_invalid_business_hours(self, admin_client):
        response = admin_client.put('/admin/settings', json={'business_hours': {'funday': {}}})
        assert response.status_code == 400
        assert 'business_hours' in response.get_json()['errors']

    def test_invalid_number(self, admin_client):
        response = admin_client.put('/admin/settings', json={'whatsapp_business_number': '12'})
        assert response.status_code == 400
        assert AdminSettings.query.count() == 0

    @pytest.mark.parametrize('hours', [
        {'monday': 'closed'},
        {'monday': {'open': 9, 'close': 18}},
        {'monday': {'open': '9am', 'close': '18:00'}},
        {'sunday': {'closed': 'yes'}},
        ['monday'],
    ])
    def test_malformed_business_hours(self, admin_client, hours):
        response = admin_client.put('/admin/settings', json={'business_hours': hours})
        assert response.status_code == 400
        assert 'business_hours' in response.get_json()['errors']
        assert AdminSettings.query.count() == 0
        assert admin_client.get('/api/contact').status_code == 200

    def test_business_hours_saved(self, admin_client):
        hours = {'monday': {'open': '08:00', 'close': '17:00'}, 'sunday': {'closed': True}}
        response = admin_client.put('/admin/settings', json={'business_hours': hours})
        assert response.status_code == 200
        assert response.get_json()['settings']['business_hours'] == hours

    def test_contact_survives_stored_bad_hours(self, admin_client, settings):
        settings.business_hours = {'monday': 'closed', 'tuesday': {'open': 9}}
        db.session.commit()
        response = admin_client.get('/api/contact')
        assert response.status_code == 200
        assert response.get_json()['is_open'] is False
        assert admin_client.get('/').status_code == 200

    def test_non_object_body(self, admin_client):
        response = admin_client.put('/admin/settings', json=[1, 2])
        assert response.status_code == 200
        assert AdminSettings.query.count() == 1
