"""
Unit Tests for partners, contact messages, newsletter and partnership requests
"""
import pytest
from httpx import AsyncClient
from faker import Faker

fake = Faker()


class TestPartners:

    async def _create(self, client: AsyncClient, headers: dict, png_file, **fields) -> dict:
        data = {'name': 'Acme Telecom', 'website': 'https://acme.example', 'order': '1'}
        data.update(fields)
        response = await client.post('/api/v1/admin/partners', headers=headers, data=data, files={'logo': png_file})
        assert response.status_code == 201
        return response.json()

    @pytest.mark.asyncio
    async def test_create_partner_stores_logo(self, client: AsyncClient, admin_auth_headers, png_file):
        partner = await self._create(client, admin_auth_headers, png_file)

        assert partner['name'] == 'Acme Telecom'
        assert partner['logo'].startswith('/uploads/partners/partner-')

    @pytest.mark.asyncio
    async def test_public_list_only_active(self, client: AsyncClient, admin_auth_headers, png_file):
        await self._create(client, admin_auth_headers, png_file, name='Visible Partner')
        await self._create(client, admin_auth_headers, png_file, name='Hidden Partner', is_active='false')

        response = await client.get('/api/v1/partners/public')

        assert response.status_code == 200
        assert [p['name'] for p in response.json()] == ['Visible Partner']

    @pytest.mark.asyncio
    async def test_create_requires_logo(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/admin/partners', headers=admin_auth_headers, data={'name': 'No Logo'})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, admin_auth_headers, png_file):
        partner = await self._create(client, admin_auth_headers, png_file)

        response = await client.put(
            f"/api/v1/admin/partners/{partner['id']}",
            headers=admin_auth_headers,
            data={'description': 'Connectivity partner'},
        )
        assert response.status_code == 200
        assert response.json()['description'] == 'Connectivity partner'
        assert response.json()['logo'] == partner['logo']

        response = await client.delete(f"/api/v1/admin/partners/{partner['id']}", headers=admin_auth_headers)
        assert response.status_code == 200

        response = await client.get(f"/api/v1/admin/partners/{partner['id']}", headers=admin_auth_headers)
        assert response.status_code == 404


class TestContact:

    @pytest.mark.asyncio
    async def test_submit_contact(self, client: AsyncClient):
        response = await client.post('/api/v1/contact', json={
            'name': fake.name(),
            'email': fake.unique.email(),
            'subject': 'Website quote',
            'message': 'Please call me about a new website.',
        })

        assert response.status_code == 201
        assert response.json()['success'] is True
        assert response.json()['data']['id']

    @pytest.mark.asyncio
    async def test_blank_message_rejected(self, client: AsyncClient):
        response = await client.post('/api/v1/contact', json={
            'name': fake.name(), 'email': fake.unique.email(), 'message': '   '
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_opening_marks_read(self, client: AsyncClient, admin_auth_headers):
        created = await client.post('/api/v1/contact', json={
            'name': fake.name(), 'email': fake.unique.email(), 'message': 'Hello there'
        })
        contact_id = created.json()['data']['id']

        response = await client.get(f'/api/v1/admin/contacts/{contact_id}', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['status'] == 'read'
        assert response.json()['read_at'] is not None

    @pytest.mark.asyncio
    async def test_replied_sets_timestamp(self, client: AsyncClient, admin_auth_headers):
        created = await client.post('/api/v1/contact', json={
            'name': fake.name(), 'email': fake.unique.email(), 'message': 'Hello there'
        })
        contact_id = created.json()['data']['id']

        response = await client.put(
            f'/api/v1/admin/contacts/{contact_id}/status',
            headers=admin_auth_headers,
            json={'status': 'replied'},
        )

        assert response.status_code == 200
        assert response.json()['replied_at'] is not None
        assert response.json()['read_at'] is not None

    @pytest.mark.asyncio
    async def test_filter_by_status(self, client: AsyncClient, admin_auth_headers):
        await client.post('/api/v1/contact', json={
            'name': fake.name(), 'email': fake.unique.email(), 'message': 'First'
        })

        pending = await client.get('/api/v1/admin/contacts?status=pending', headers=admin_auth_headers)
        replied = await client.get('/api/v1/admin/contacts?status=replied', headers=admin_auth_headers)

        assert pending.json()['total'] == 1
        assert replied.json()['total'] == 0


class TestNewsletter:

    @pytest.mark.asyncio
    async def test_subscribe_new_email(self, client: AsyncClient):
        response = await client.post('/api/v1/newsletter/subscribe', json={'email': 'Reader@Example.com'})

        assert response.status_code == 201
        assert response.json()['subscriber']['email'] == 'reader@example.com'

    @pytest.mark.asyncio
    async def test_subscribe_twice(self, client: AsyncClient):
        await client.post('/api/v1/newsletter/subscribe', json={'email': 'reader@example.com'})
        response = await client.post('/api/v1/newsletter/subscribe', json={'email': 'reader@example.com'})

        assert response.status_code == 200
        assert response.json()['message'] == 'You are already subscribed'

    @pytest.mark.asyncio
    async def test_unsubscribe_then_reactivate(self, client: AsyncClient):
        await client.post('/api/v1/newsletter/subscribe', json={'email': 'reader@example.com'})

        response = await client.post('/api/v1/newsletter/unsubscribe', json={'email': 'reader@example.com'})
        assert response.status_code == 200

        response = await client.post('/api/v1/newsletter/subscribe', json={'email': 'reader@example.com'})
        assert response.status_code == 200
        assert response.json()['subscriber']['is_active'] is True

    @pytest.mark.asyncio
    async def test_unsubscribe_unknown_email(self, client: AsyncClient):
        response = await client.post('/api/v1/newsletter/unsubscribe', json={'email': 'nobody@example.com'})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_signed_in_user_without_email(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post('/api/v1/newsletter/subscribe', headers=auth_headers, json={})

        assert response.status_code == 201
        assert response.json()['subscriber']['email'] == test_user.email.lower()

    @pytest.mark.asyncio
    async def test_anonymous_without_email(self, client: AsyncClient):
        response = await client.post('/api/v1/newsletter/subscribe', json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_stats(self, client: AsyncClient, admin_auth_headers):
        await client.post('/api/v1/newsletter/subscribe', json={'email': 'one@example.com'})
        await client.post('/api/v1/newsletter/subscribe', json={'email': 'two@example.com'})
        await client.post('/api/v1/newsletter/unsubscribe', json={'email': 'two@example.com'})

        response = await client.get('/api/v1/admin/newsletter/stats', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json() == {'total': 2, 'active': 1, 'inactive': 1, 'recent': 2}


class TestPartnershipRequests:

    @pytest.mark.asyncio
    async def test_submit_normalizes_website(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/partnership-requests', json={
            'company_name': 'Kampala Solar Ltd',
            'contact_email': fake.unique.email(),
            'website': 'kampalasolar.example',
            'description': 'We install solar systems and want to resell your meters.',
        })
        assert response.status_code == 201
        request_id = response.json()['data']['id']

        detail = await client.get(f'/api/v1/admin/partnership-requests/{request_id}', headers=admin_auth_headers)
        assert detail.json()['website'] == 'https://kampalasolar.example'
        assert detail.json()['status'] == 'pending'

    @pytest.mark.asyncio
    async def test_short_description_rejected(self, client: AsyncClient):
        response = await client.post('/api/v1/partnership-requests', json={
            'company_name': 'Tiny Co',
            'contact_email': fake.unique.email(),
            'description': 'short',
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_review_sets_reviewed_at(self, client: AsyncClient, admin_auth_headers):
        created = await client.post('/api/v1/partnership-requests', json={
            'company_name': 'Kampala Solar Ltd',
            'contact_email': fake.unique.email(),
            'description': 'We install solar systems across the region.',
        })
        request_id = created.json()['data']['id']

        response = await client.put(
            f'/api/v1/admin/partnership-requests/{request_id}/status',
            headers=admin_auth_headers,
            json={'status': 'approved', 'admin_notes': 'Good fit'},
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'approved'
        assert response.json()['reviewed_at'] is not None
