"""
Unit Tests for request schemas
Tests for: field validation, normalization, cross-field rules
"""
import pytest
from pydantic import ValidationError

from app.schemas.auth import UserRegister, UserUpdate
from app.schemas.award import NominationCreate
from app.schemas.product import ProductCreate
from app.schemas.service import ServiceQuoteCreate
from app.schemas.site import ContactCreate, PartnershipRequestCreate

REASON = "x" * 60


class TestUserSchemas:
    """Test registration and profile update schemas"""

    def test_name_is_stripped(self):
        user = UserRegister(name="  Jane Doe ", email="jane@example.com", password="password123")
        assert user.name == "Jane Doe"

    def test_blank_name_fails(self):
        with pytest.raises(ValidationError):
            UserRegister(name="   ", email="jane@example.com", password="password123")

    def test_new_password_needs_current(self):
        with pytest.raises(ValidationError) as exc_info:
            UserUpdate(new_password="newpassword123")
        assert "Current password is required" in str(exc_info.value)


class TestServiceQuoteCreate:

    def test_free_text_service(self):
        quote = ServiceQuoteCreate(
            service_name="Logo design",
            customer_name="Peter Okello",
            customer_email="peter@example.com",
        )
        assert quote.service_id is None
        assert quote.budget_range.value == "Not sure"

    def test_blank_service_name_fails(self):
        with pytest.raises(ValidationError):
            ServiceQuoteCreate(service_name="  ", customer_name="Peter Okello", customer_email="peter@example.com")

    def test_phone_required_for_both(self):
        with pytest.raises(ValidationError):
            ServiceQuoteCreate(
                service_id="abc",
                customer_name="Peter Okello",
                customer_email="peter@example.com",
                preferred_contact="both",
            )


class TestProductCreate:

    def _base(self, **overrides) -> dict:
        data = {
            "name": "Smart Meter",
            "short_description": "Prepaid meter",
            "technical_description": "LoRaWAN meter",
        }
        data.update(overrides)
        return data

    def test_tags_lowercased_and_trimmed(self):
        product = ProductCreate(**self._base(tags=[" IoT ", "", "Water"]))
        assert product.tags == ["iot", "water"]

    def test_fixed_price_needs_amount(self):
        with pytest.raises(ValidationError):
            ProductCreate(**self._base(price_type="fixed"))


class TestSiteSchemas:

    def test_contact_message_trimmed(self):
        contact = ContactCreate(name="Amina", email="amina@example.com", message="  Hello  ")
        assert contact.message == "Hello"

    def test_partnership_website_gets_scheme(self):
        request = PartnershipRequestCreate(
            company_name="Kampala Solar",
            contact_email="info@kampalasolar.example",
            website="kampalasolar.example",
            description="Solar installer looking to resell meters",
        )
        assert request.website == "https://kampalasolar.example"


class TestNominationCreate:

    def _base(self, **overrides) -> dict:
        data = {
            "nominee_name": "Grace Achieng",
            "category_id": "cat-1",
            "nomination_reason": REASON,
            "nominator_name": "Peter Okello",
            "nominator_email": "peter@example.com",
        }
        data.update(overrides)
        return data

    def test_defaults(self):
        nomination = NominationCreate(**self._base())
        assert nomination.nominee_country == "Uganda"

    @pytest.mark.parametrize("reason", ["x" * 49, "x" * 1001])
    def test_reason_length_bounds(self, reason):
        with pytest.raises(ValidationError):
            NominationCreate(**self._base(nomination_reason=reason))

    def test_invalid_phone(self):
        with pytest.raises(ValidationError):
            NominationCreate(**self._base(nominator_phone="12ab"))
