"""
Unit Tests for Authentication API Endpoints
"""
import pytest
from datetime import datetime, timedelta
from httpx import AsyncClient
from faker import Faker

fake = Faker()


class TestUserRegistration:
    """Test user registration endpoint"""

    @pytest.mark.asyncio
    async def test_register_success(self, client: AsyncClient):
        user_data = {
            'email': fake.unique.email(),
            'password': 'securePassword123!',
            'name': fake.name(),
        }

        response = await client.post('/api/v1/auth/register', json=user_data)

        assert response.status_code == 201
        data = response.json()
        assert data['email'] == user_data['email']
        assert data['role'] == 'user'
        assert 'id' in data
        assert 'hashed_password' not in data

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client: AsyncClient, test_user):
        user_data = {
            'email': test_user.email,
            'password': 'securePassword123!',
            'name': fake.name(),
        }

        response = await client.post('/api/v1/auth/register', json=user_data)

        assert response.status_code == 409
        body = response.json()
        assert 'already registered' in body['detail'].lower()
        assert body['code'] == 'CONFLICT'
        assert body['details'] == {'field': 'email'}

    @pytest.mark.asyncio
    async def test_register_invalid_email(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/register', json={
            'email': 'not-an-email', 'password': 'securePassword123!', 'name': fake.name()
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_register_with_short_password(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/register', json={
            'email': fake.unique.email(), 'password': '123', 'name': fake.name()
        })
        assert response.status_code == 422


class TestUserLogin:
    """Test login and account lockout"""

    @pytest.mark.asyncio
    async def test_login_success(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })

        assert response.status_code == 200
        data = response.json()
        assert data['token_type'] == 'bearer'
        assert data['access_token']
        assert data['refresh_token']
        assert data['user']['email'] == test_user.email
        assert data['user']['last_login'] is not None

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, test_user):
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'wrongpassword'
        })

        assert response.status_code == 401
        assert response.json()['detail'] == 'Incorrect email or password'

    @pytest.mark.asyncio
    async def test_login_unknown_email(self, client: AsyncClient):
        response = await client.post('/api/v1/auth/login', json={
            'email': fake.unique.email(), 'password': 'whatever123'
        })
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_fifth_failure_locks_account(self, client: AsyncClient, test_user):
        for _ in range(4):
            response = await client.post('/api/v1/auth/login', json={
                'email': test_user.email, 'password': 'wrongpassword'
            })
            assert response.status_code == 401

        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'wrongpassword'
        })
        assert response.status_code == 423
        assert response.json()['code'] == 'ACCOUNT_LOCKED'

        # Correct password is refused while locked
        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })
        assert response.status_code == 423

    @pytest.mark.asyncio
    async def test_expired_lock_allows_login(self, client: AsyncClient, test_user, db_session):
        test_user.locked_until = datetime.utcnow() - timedelta(minutes=1)
        await db_session.commit()

        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_inactive_user(self, client: AsyncClient, test_user, db_session):
        test_user.is_active = False
        await db_session.commit()

        response = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })
        assert response.status_code == 403


class TestTokens:

    @pytest.mark.asyncio
    async def test_refresh_token(self, client: AsyncClient, test_user):
        login = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })

        response = await client.post('/api/v1/auth/refresh', json={
            'refresh_token': login.json()['refresh_token']
        })

        assert response.status_code == 200
        assert response.json()['access_token']

    @pytest.mark.asyncio
    async def test_access_token_cannot_refresh(self, client: AsyncClient, test_user):
        login = await client.post('/api/v1/auth/login', json={
            'email': test_user.email, 'password': 'testpassword123'
        })

        response = await client.post('/api/v1/auth/refresh', json={
            'refresh_token': login.json()['access_token']
        })
        assert response.status_code == 401


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_get_me(self, client: AsyncClient, test_user, auth_headers):
        response = await client.get('/api/v1/auth/me', headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['id'] == test_user.id

    @pytest.mark.asyncio
    async def test_get_me_without_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me')
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_get_me_with_invalid_token(self, client: AsyncClient):
        response = await client.get('/api/v1/auth/me', headers={'Authorization': 'Bearer not-a-token'})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_change_password_requires_current(self, client: AsyncClient, auth_headers):
        response = await client.put('/api/v1/auth/me', headers=auth_headers, json={
            'current_password': 'wrong-password', 'new_password': 'newpassword123'
        })
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_name(self, client: AsyncClient, auth_headers):
        response = await client.put('/api/v1/auth/me', headers=auth_headers, json={'name': '  Grace Achieng  '})

        assert response.status_code == 200
        assert response.json()['name'] == 'Grace Achieng'
