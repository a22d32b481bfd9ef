"""
Unit Tests for the service, project and product catalogs
"""
import pytest
from httpx import AsyncClient
from faker import Faker

from app.models import Project, ProjectVisibility

fake = Faker()


class TestServices:

    @pytest.mark.asyncio
    async def test_list_services(self, client: AsyncClient, service):
        response = await client.get('/api/v1/services')

        assert response.status_code == 200
        data = response.json()
        assert data['total'] == 1
        assert data['page'] == 1
        assert data['has_next'] is False
        assert data['items'][0]['title'] == service.title

    @pytest.mark.asyncio
    async def test_get_unknown_service(self, client: AsyncClient):
        response = await client.get('/api/v1/services/does-not-exist')
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_categories(self, client: AsyncClient, service):
        response = await client.get('/api/v1/services/categories')

        assert response.status_code == 200
        assert response.json() == [{'category': 'Other', 'count': 1}]

    @pytest.mark.asyncio
    async def test_quote_for_catalog_service(self, client: AsyncClient, service):
        response = await client.post('/api/v1/services/quotes', json={
            'service_id': service.id,
            'customer_name': fake.name(),
            'customer_email': fake.unique.email(),
            'project_details': 'A booking site for our clinic',
        })

        assert response.status_code == 201
        data = response.json()
        assert data['service_name'] == service.title
        assert data['status'] == 'new'

    @pytest.mark.asyncio
    async def test_quote_requires_service(self, client: AsyncClient):
        response = await client.post('/api/v1/services/quotes', json={
            'customer_name': fake.name(),
            'customer_email': fake.unique.email(),
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_quote_phone_contact_needs_phone(self, client: AsyncClient):
        response = await client.post('/api/v1/services/quotes', json={
            'service_name': 'Logo design',
            'customer_name': fake.name(),
            'customer_email': fake.unique.email(),
            'preferred_contact': 'phone',
        })
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_admin_create_invalidates_listing(self, client: AsyncClient, service, admin_auth_headers):
        first = await client.get('/api/v1/services')
        assert first.json()['total'] == 1

        response = await client.post('/api/v1/admin/services', headers=admin_auth_headers, json={
            'title': 'Mobile Apps',
            'description': 'Android and iOS development',
            'category': 'Mobile Development',
        })
        assert response.status_code == 201

        second = await client.get('/api/v1/services')
        assert second.json()['total'] == 2

    @pytest.mark.asyncio
    async def test_admin_toggle_featured(self, client: AsyncClient, service, admin_auth_headers):
        response = await client.patch(f'/api/v1/admin/services/{service.id}/featured', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['featured'] is True

    @pytest.mark.asyncio
    async def test_admin_update_quote_status(self, client: AsyncClient, service, admin_auth_headers):
        quote = await client.post('/api/v1/services/quotes', json={
            'service_id': service.id,
            'customer_name': fake.name(),
            'customer_email': fake.unique.email(),
        })

        response = await client.put(
            f"/api/v1/admin/services/quotes/{quote.json()['id']}",
            headers=admin_auth_headers,
            json={'status': 'quoted', 'admin_notes': 'Sent estimate'},
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'quoted'

    @pytest.mark.asyncio
    async def test_admin_requires_admin_role(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/admin/services', headers=auth_headers)
        assert response.status_code == 403


class TestProjects:

    @pytest.mark.asyncio
    async def test_list_public_projects(self, client: AsyncClient, project, db_session):
        db_session.add(Project(
            title="Internal Tool",
            description="Private dashboard",
            visibility=ProjectVisibility.PRIVATE,
        ))
        await db_session.commit()

        response = await client.get('/api/v1/projects')

        assert response.status_code == 200
        titles = [p['title'] for p in response.json()['items']]
        assert titles == [project.title]

    @pytest.mark.asyncio
    async def test_get_project_counts_view(self, client: AsyncClient, project):
        await client.get(f'/api/v1/projects/{project.id}')
        response = await client.get(f'/api/v1/projects/{project.id}')

        assert response.status_code == 200
        assert response.json()['views'] == 2

    @pytest.mark.asyncio
    async def test_admin_rejects_end_before_start(self, client: AsyncClient, project, admin_auth_headers):
        response = await client.put(f'/api/v1/admin/projects/{project.id}', headers=admin_auth_headers, json={
            'start_date': '2025-06-01T00:00:00',
            'end_date': '2025-01-01T00:00:00',
        })
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_add_image(self, client: AsyncClient, project, admin_auth_headers, png_file):
        response = await client.post(
            f'/api/v1/admin/projects/{project.id}/images',
            headers=admin_auth_headers,
            files={'image': png_file},
        )

        assert response.status_code == 200
        images = response.json()['images']
        assert len(images) == 1
        assert images[0]['is_primary'] is True
        assert images[0]['url'].startswith('/uploads/projects/')


class TestProducts:

    @pytest.mark.asyncio
    async def test_list_products(self, client: AsyncClient, product):
        response = await client.get('/api/v1/products')

        assert response.status_code == 200
        assert response.json()['items'][0]['name'] == product.name

    @pytest.mark.asyncio
    async def test_inactive_product_hidden(self, client: AsyncClient, product, db_session):
        product.is_active = False
        await db_session.commit()

        response = await client.get(f'/api/v1/products/{product.id}')
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_inquiry_counts_toward_product(self, client: AsyncClient, product):
        response = await client.post('/api/v1/products/inquiries', json={
            'product_id': product.id,
            'customer_name': fake.name(),
            'customer_email': fake.unique.email(),
            'message': 'Do you ship to Kenya?',
        })

        assert response.status_code == 201
        assert response.json()['product_name'] == product.name

        detail = await client.get(f'/api/v1/products/{product.id}')
        assert detail.json()['inquiries'] == 1

    @pytest.mark.asyncio
    async def test_reorder_products(self, client: AsyncClient, product, admin_auth_headers):
        response = await client.put('/api/v1/products/admin/products-order', headers=admin_auth_headers, json={
            'products': [{'id': product.id, 'display_order': 7}],
        })

        assert response.status_code == 200
        assert response.json()['data'] == {'updated': 1}

        detail = await client.get(f'/api/v1/products/{product.id}')
        assert detail.json()['display_order'] == 7

    @pytest.mark.asyncio
    async def test_reorder_unknown_product(self, client: AsyncClient, admin_auth_headers):
        response = await client.put('/api/v1/products/admin/products-order', headers=admin_auth_headers, json={
            'products': [{'id': 'missing', 'display_order': 1}],
        })
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_analytics(self, client: AsyncClient, product, admin_auth_headers):
        response = await client.get('/api/v1/products/admin/analytics', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['total'] == 1
        assert data['active'] == 1
        assert data['most_viewed'][0]['id'] == product.id

    @pytest.mark.asyncio
    async def test_admin_create_product(self, client: AsyncClient, admin_auth_headers):
        response = await client.post('/api/v1/admin/products', headers=admin_auth_headers, json={
            'name': 'Solar Charge Controller',
            'short_description': 'MPPT controller',
            'technical_description': '40A MPPT controller with Bluetooth monitoring',
            'category': 'Electronics',
            'tags': ['Solar', ' solar ', 'energy'],
        })

        assert response.status_code == 201
        assert response.json()['name'] == 'Solar Charge Controller'
