"""
Unit Tests for the admin dashboard and user management
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient

from app.models import NominationStatus


class TestDashboard:

    @pytest.mark.asyncio
    async def test_stats(self, client: AsyncClient, admin_auth_headers, service, make_nomination):
        await make_nomination(NominationStatus.PENDING)
        await client.post('/api/v1/contact', json={
            'name': 'Peter Okello', 'email': 'peter@example.com', 'message': 'Hello'
        })

        response = await client.get('/api/v1/admin/dashboard/stats', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['users'] == 1
        assert data['services'] == 1
        assert data['pending_nominations'] == 1
        assert data['pending_contacts'] == 1
        assert data['recent_contacts'][0]['email'] == 'peter@example.com'

    @pytest.mark.asyncio
    async def test_system_health(self, client: AsyncClient, admin_auth_headers):
        response = await client.get('/api/v1/admin/system/health', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['environment'] == 'testing'
        assert data['uptime_seconds'] >= 0
        assert 'hit_rate' in data['cache']

    @pytest.mark.asyncio
    async def test_clear_cache(self, client: AsyncClient, admin_auth_headers, service):
        await client.get('/api/v1/services')
        stats = await client.get('/api/v1/admin/cache/stats', headers=admin_auth_headers)
        assert stats.json()['keys'] >= 1

        response = await client.delete('/api/v1/admin/cache', headers=admin_auth_headers)
        assert response.status_code == 200

        stats = await client.get('/api/v1/admin/cache/stats', headers=admin_auth_headers)
        assert stats.json()['keys'] == 0

    @pytest.mark.asyncio
    async def test_requires_admin(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/admin/dashboard/stats', headers=auth_headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_requires_token(self, client: AsyncClient):
        response = await client.get('/api/v1/admin/dashboard/stats')
        assert response.status_code in (401, 403)


class TestUserManagement:

    @pytest.mark.asyncio
    async def test_list_users(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.get('/api/v1/admin/users?role=user', headers=admin_auth_headers)

        assert response.status_code == 200
        assert [u['email'] for u in response.json()['items']] == [test_user.email]

    @pytest.mark.asyncio
    async def test_promote_user(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.put(
            f'/api/v1/admin/users/{test_user.id}/role', headers=admin_auth_headers, json={'role': 'admin'}
        )

        assert response.status_code == 200
        assert response.json()['role'] == 'admin'

    @pytest.mark.asyncio
    async def test_cannot_demote_self(self, client: AsyncClient, admin_auth_headers, admin_user):
        response = await client.put(
            f'/api/v1/admin/users/{admin_user.id}/role', headers=admin_auth_headers, json={'role': 'user'}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unlock_user(self, client: AsyncClient, admin_auth_headers, test_user, db_session):
        test_user.locked_until = datetime.utcnow() + timedelta(minutes=30)
        test_user.failed_login_attempts = 3
        await db_session.commit()

        response = await client.post(f'/api/v1/admin/users/{test_user.id}/unlock', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['locked_until'] is None
        assert response.json()['failed_login_attempts'] == 0

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, client: AsyncClient, admin_auth_headers, admin_user):
        response = await client.delete(f'/api/v1/admin/users/{admin_user.id}', headers=admin_auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_user(self, client: AsyncClient, admin_auth_headers, test_user):
        response = await client.delete(f'/api/v1/admin/users/{test_user.id}', headers=admin_auth_headers)
        assert response.status_code == 200
