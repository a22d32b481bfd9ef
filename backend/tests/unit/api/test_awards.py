"""
Unit Tests for awards, voting and certificates
"""
import pytest
from datetime import datetime
from httpx import AsyncClient
from faker import Faker

from app.models import NominationStatus


fake = Faker()

REASON = (
    "Trained over three hundred young women in embedded systems and helped "
    "launch twelve hardware startups in northern Uganda."
)


def _nomination_form(category_id: str, **overrides) -> dict:
    form = {
        'nominee_name': 'Grace Achieng',
        'category_id': category_id,
        'nomination_reason': REASON,
        'nominator_name': fake.name(),
        'nominator_email': fake.unique.email(),
        'nominee_company': 'Achieng Agritech',
    }
    form.update(overrides)
    return form


class TestNominations:

    @pytest.mark.asyncio
    async def test_submit_nomination(self, client: AsyncClient, award_category, png_file):
        response = await client.post(
            '/api/v1/awards/nominations',
            data=_nomination_form(award_category.id),
            files={'nominee_photo': png_file},
        )

        assert response.status_code == 201
        data = response.json()
        assert data['status'] == 'pending'
        assert data['votes'] == 0
        assert data['nominee_photo'].startswith('/uploads/awards/nominee-')
        assert data['slug'].startswith('grace-achieng')
        assert 'nominator_email' not in data

    @pytest.mark.asyncio
    async def test_short_reason_rejected(self, client: AsyncClient, award_category, png_file):
        response = await client.post(
            '/api/v1/awards/nominations',
            data=_nomination_form(award_category.id, nomination_reason='Too short'),
            files={'nominee_photo': png_file},
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_photo_required(self, client: AsyncClient, award_category):
        response = await client.post('/api/v1/awards/nominations', data=_nomination_form(award_category.id))
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_category(self, client: AsyncClient, png_file):
        response = await client.post(
            '/api/v1/awards/nominations',
            data=_nomination_form('no-such-category'),
            files={'nominee_photo': png_file},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_public_list_hides_pending(self, client: AsyncClient, make_nomination):
        approved = await make_nomination(NominationStatus.APPROVED)
        await make_nomination(NominationStatus.PENDING)

        response = await client.get('/api/v1/awards/nominations')

        assert response.status_code == 200
        assert [n['id'] for n in response.json()['items']] == [approved.id]

    @pytest.mark.asyncio
    async def test_public_list_rejects_private_status(self, client: AsyncClient):
        response = await client.get('/api/v1/awards/nominations?status=pending')
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_get_by_slug(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.WINNER)

        response = await client.get(f'/api/v1/awards/nominations/{nomination.slug}')

        assert response.status_code == 200
        assert response.json()['id'] == nomination.id

    @pytest.mark.asyncio
    async def test_pending_not_public(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.PENDING)

        response = await client.get(f'/api/v1/awards/nominations/{nomination.id}')
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_categories_include_counts(self, client: AsyncClient, award_category, make_nomination):
        await make_nomination(NominationStatus.APPROVED)

        response = await client.get('/api/v1/awards/categories')

        assert response.status_code == 200
        assert response.json()[0]['name'] == award_category.name


class TestVoting:

    @pytest.mark.asyncio
    async def test_vote_once_per_email(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.APPROVED)
        url = f'/api/v1/awards/nominations/{nomination.id}/vote'

        first = await client.post(url, json={'voter_email': 'Fan@Example.com'})
        assert first.status_code == 200
        assert first.json() == {'success': True, 'message': 'Vote recorded successfully', 'votes': 1}

        second = await client.post(url, json={'voter_email': 'fan@example.com'})
        assert second.status_code == 400

        other = await client.post(url, json={'voter_email': 'another@example.com'})
        assert other.json()['votes'] == 2

    @pytest.mark.asyncio
    async def test_cannot_vote_for_pending(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.PENDING)

        response = await client.post(
            f'/api/v1/awards/nominations/{nomination.id}/vote', json={'voter_email': 'fan@example.com'}
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_vote_status(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.APPROVED)
        await client.post(f'/api/v1/awards/nominations/{nomination.id}/vote', json={'voter_email': 'fan@example.com'})

        voted = await client.get(f'/api/v1/awards/nominations/{nomination.id}/vote-status?email=fan@example.com')
        not_voted = await client.get(f'/api/v1/awards/nominations/{nomination.id}/vote-status?email=new@example.com')

        assert voted.json()['has_voted'] is True
        assert voted.json()['votes'] == 1
        assert not_voted.json()['has_voted'] is False

class TestPublicNominationOrdering:

    @pytest.fixture
    async def ranked(self, make_nomination):
        return {
            'zawadi': await make_nomination(
                NominationStatus.APPROVED, nominee_name='Zawadi Okello', votes=5,
                created_at=datetime(2025, 1, 1),
            ),
            'amani': await make_nomination(
                NominationStatus.APPROVED, nominee_name='Amani Nakato', votes=5,
                created_at=datetime(2025, 2, 1),
            ),
            'mosi': await make_nomination(
                NominationStatus.APPROVED, nominee_name='Mosi Kato', votes=9,
                created_at=datetime(2025, 1, 15),
            ),
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize('sort,order,expected', [
        ('votes', 'desc', ['mosi', 'amani', 'zawadi']),
        ('votes', 'asc', ['amani', 'zawadi', 'mosi']),
        ('created_at', 'desc', ['amani', 'mosi', 'zawadi']),
        ('created_at', 'asc', ['zawadi', 'mosi', 'amani']),
        ('nominee_name', 'asc', ['amani', 'mosi', 'zawadi']),
        ('nominee_name', 'desc', ['zawadi', 'mosi', 'amani']),
    ])
    async def test_sort_and_order(self, client: AsyncClient, ranked, sort, order, expected):
        response = await client.get(f'/api/v1/awards/nominations?sort={sort}&order={order}')

        assert response.status_code == 200
        assert [n['id'] for n in response.json()['items']] == [ranked[key].id for key in expected]

    @pytest.mark.asyncio
    async def test_default_is_most_votes_first(self, client: AsyncClient, ranked):
        response = await client.get('/api/v1/awards/nominations')

        assert response.json()['items'][0]['id'] == ranked['mosi'].id

    @pytest.mark.asyncio
    async def test_unknown_sort_rejected(self, client: AsyncClient):
        response = await client.get('/api/v1/awards/nominations?sort=nominator_email')
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_vote_refreshes_cached_list(self, client: AsyncClient, make_nomination):
        nomination = await make_nomination(NominationStatus.APPROVED)

        before = await client.get('/api/v1/awards/nominations')
        assert before.json()['items'][0]['votes'] == 0

        vote = await client.post(
            f'/api/v1/awards/nominations/{nomination.id}/vote', json={'voter_email': 'fan@example.com'}
        )
        assert vote.status_code == 200

        after = await client.get('/api/v1/awards/nominations')
        assert after.json()['items'][0]['votes'] == 1


class TestAdminAwards:

    @pytest.mark.asyncio
    async def test_create_category_conflict(self, client: AsyncClient, award_category, admin_auth_headers):
        response = await client.post('/api/v1/admin/awards/categories', headers=admin_auth_headers, json={
            'name': 'innovation excellence', 'description': 'Duplicate'
        })
        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_delete_category_in_use(self, client: AsyncClient, award_category, make_nomination, admin_auth_headers):
        await make_nomination(NominationStatus.PENDING)

        response = await client.delete(f'/api/v1/admin/awards/categories/{award_category.id}', headers=admin_auth_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_approval_issues_certificate(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.PENDING)

        response = await client.put(
            f'/api/v1/admin/awards/nominations/{nomination.id}/status',
            headers=admin_auth_headers,
            json={'status': 'winner', 'admin_notes': 'Unanimous'},
        )

        assert response.status_code == 200
        data = response.json()
        assert data['nomination']['status'] == 'winner'
        assert data['certificate_generated'] is True
        assert data['certificate_id'].startswith('WIN-')
        assert data['certificate_error'] is None

    @pytest.mark.asyncio
    async def test_rejection_issues_no_certificate(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.PENDING)

        response = await client.put(
            f'/api/v1/admin/awards/nominations/{nomination.id}/status',
            headers=admin_auth_headers,
            json={'status': 'rejected'},
        )

        assert response.status_code == 200
        assert response.json()['certificate_generated'] is False
        assert response.json()['certificate_id'] is None

    @pytest.mark.asyncio
    async def test_admin_list_sees_every_status(self, client: AsyncClient, make_nomination, admin_auth_headers):
        await make_nomination(NominationStatus.PENDING)
        await make_nomination(NominationStatus.REJECTED)

        response = await client.get('/api/v1/admin/awards/nominations', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['total'] == 2
        assert 'nominator_email' in response.json()['items'][0]

    @pytest.mark.asyncio
    async def test_statistics(self, client: AsyncClient, make_nomination, admin_auth_headers):
        await make_nomination(NominationStatus.APPROVED, votes=3)
        await make_nomination(NominationStatus.PENDING, nominee_country='Kenya')

        response = await client.get('/api/v1/admin/awards/statistics', headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data['total_nominations'] == 2
        assert data['by_status']['approved'] == 1
        assert data['total_votes'] == 3
        assert data['local_nominations'] == 1
        assert data['international_nominations'] == 1

    @pytest.mark.asyncio
    async def test_top_nominees_only_approved(self, client: AsyncClient, make_nomination, admin_auth_headers):
        approved = await make_nomination(NominationStatus.APPROVED, votes=1)
        await make_nomination(NominationStatus.WINNER, votes=50)
        await make_nomination(NominationStatus.FINALIST, votes=20)

        response = await client.get('/api/v1/admin/awards/statistics', headers=admin_auth_headers)

        assert response.status_code == 200
        top = response.json()['top_nominees']
        assert [n['id'] for n in top] == [approved.id]
        assert top[0]['votes'] == 1

    @pytest.mark.asyncio
    async def test_non_admin_forbidden(self, client: AsyncClient, auth_headers):
        response = await client.get('/api/v1/admin/awards/statistics', headers=auth_headers)
        assert response.status_code == 403


class TestCertificates:

    async def _issue(self, client: AsyncClient, headers: dict, nomination_id: str) -> dict:
        response = await client.post(f'/api/v1/admin/certificates/generate/{nomination_id}', headers=headers)
        assert response.status_code == 200
        return response.json()

    @pytest.mark.asyncio
    async def test_verify_and_download(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.FINALIST)
        issued = await self._issue(client, admin_auth_headers, nomination.id)

        verify = await client.get(f"/api/v1/certificates/verify/{issued['certificate_id']}")
        assert verify.status_code == 200
        assert verify.json()['valid'] is True
        assert verify.json()['certificate_type'] == 'finalist'
        assert verify.json()['verification_count'] == 1

        download = await client.get(issued['download_url'])
        assert download.status_code == 200
        assert download.headers['content-type'] == 'application/pdf'
        assert download.content.startswith(b'%PDF')

    @pytest.mark.asyncio
    async def test_verify_unknown(self, client: AsyncClient):
        response = await client.get('/api/v1/certificates/verify/WIN-2025-ABCDEF-0000')

        assert response.status_code == 404
        assert response.json()['valid'] is False

    @pytest.mark.asyncio
    async def test_revoked_certificate_invalid(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.WINNER)
        issued = await self._issue(client, admin_auth_headers, nomination.id)

        response = await client.post(
            f"/api/v1/admin/certificates/{issued['certificate_id']}/revoke", headers=admin_auth_headers
        )
        assert response.json()['status'] == 'revoked'

        verify = await client.get(f"/api/v1/certificates/verify/{issued['certificate_id']}")
        assert verify.status_code == 404

    @pytest.mark.asyncio
    async def test_generate_for_pending_rejected(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.PENDING)

        response = await client.post(
            f'/api/v1/admin/certificates/generate/{nomination.id}', headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()['code'] == 'CERTIFICATE_ERROR'

    @pytest.mark.asyncio
    async def test_download_rejects_other_files(self, client: AsyncClient):
        response = await client.get('/api/v1/certificates/download/signature-info.json')
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_certificate(self, client: AsyncClient, make_nomination, admin_auth_headers):
        nomination = await make_nomination(NominationStatus.APPROVED)
        await self._issue(client, admin_auth_headers, nomination.id)

        first = await client.delete(
            f'/api/v1/admin/certificates/nomination/{nomination.id}', headers=admin_auth_headers
        )
        second = await client.delete(
            f'/api/v1/admin/certificates/nomination/{nomination.id}', headers=admin_auth_headers
        )

        assert first.status_code == 200
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_bulk_generate(self, client: AsyncClient, make_nomination, admin_auth_headers):
        await make_nomination(NominationStatus.WINNER)
        await make_nomination(NominationStatus.APPROVED)
        await make_nomination(NominationStatus.REJECTED)

        response = await client.post('/api/v1/admin/certificates/bulk', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['total'] == 2
        assert response.json()['succeeded'] == 2

    @pytest.mark.asyncio
    async def test_signature_status_without_upload(self, client: AsyncClient, admin_auth_headers):
        await client.delete('/api/v1/admin/certificates/signature', headers=admin_auth_headers)

        response = await client.get('/api/v1/admin/certificates/signature/status', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['configured'] is False

    @pytest.mark.asyncio
    async def test_certificate_info_requires_login(self, client: AsyncClient, make_nomination, auth_headers):
        nomination = await make_nomination(NominationStatus.APPROVED)

        response = await client.get(f'/api/v1/certificates/nomination/{nomination.id}', headers=auth_headers)

        assert response.status_code == 200
        assert response.json()['has_certificate'] is False
