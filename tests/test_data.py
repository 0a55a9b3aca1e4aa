"""Tests for the booking test-data generator."""
from datetime import date, timedelta

import pytest

from booker.data import ADDITIONAL_NEEDS, MAX_INT, BookingDataGenerator
from booker.exceptions import UnknownBookingField
from booker.models import AuthRequest, Booking

TODAY = date(2026, 3, 1)


@pytest.fixture
def gen():
    return BookingDataGenerator(seed=1234, today=TODAY)


def stay(booking: Booking):
    dates = booking.booking_dates
    return (dates.check_in - TODAY).days, (dates.check_out - dates.check_in).days


class TestRandomBooking:

    def test_ranges(self, gen):
        for _ in range(200):
            b = gen.random_booking()
            lead, nights = stay(b)
            assert 1 <= lead <= 29
            assert 1 <= nights <= 13
            assert 50 <= b.total_price < 2000
            assert isinstance(b.deposit_paid, bool)
            assert b.additional_needs in ADDITIONAL_NEEDS
            assert b.first_name and b.last_name

    def test_same_seed_replays(self):
        a = BookingDataGenerator(seed=42, today=TODAY)
        b = BookingDataGenerator(seed=42, today=TODAY)
        assert [a.random_booking() for _ in range(5)] == [b.random_booking() for _ in range(5)]

    def test_defaults_to_today(self):
        b = BookingDataGenerator(seed=1).random_booking()
        assert b.booking_dates.check_in > date.today()


class TestFixedVariants:

    def test_invalid_booking(self, gen):
        b = gen.invalid_booking()
        assert b.first_name == "" and b.last_name == ""
        assert b.total_price == -100
        assert b.deposit_paid is None
        assert b.booking_dates.check_in == TODAY + timedelta(days=10)
        assert b.booking_dates.check_out == TODAY + timedelta(days=5)

    def test_inverted_dates(self, gen):
        b = gen.booking_with_invalid_dates()
        assert b.booking_dates.check_out == b.booking_dates.check_in - timedelta(days=5)
        assert b.additional_needs

    def test_same_dates(self, gen):
        b = gen.booking_with_same_dates()
        assert b.booking_dates.check_in == b.booking_dates.check_out == TODAY + timedelta(days=5)
        assert 50 <= b.total_price < 500
        assert b.additional_needs == "Same day booking"

    def test_past_dates(self, gen):
        for _ in range(50):
            b = gen.booking_with_past_dates()
            lead, nights = stay(b)
            assert -29 <= lead <= -5
            assert 1 <= nights <= 6
            assert 50 <= b.total_price < 1000

    def test_future_dates(self, gen):
        for _ in range(50):
            b = gen.booking_with_future_dates()
            lead, nights = stay(b)
            assert 365 <= lead <= 1094
            assert 1 <= nights <= 20
            assert 100 <= b.total_price < 3000

    def test_minimal(self, gen):
        b = gen.minimal_booking()
        assert (b.first_name, b.last_name, b.total_price, b.deposit_paid) == ("John", "Doe", 100, True)
        assert b.additional_needs is None
        assert stay(b) == (1, 1)
        assert gen.minimal_booking() == b

    def test_extreme_values(self, gen):
        b = gen.booking_with_extreme_values()
        assert b.first_name == "A" * 100
        assert b.last_name == "B" * 100
        assert b.total_price == MAX_INT == 2147483647
        assert len(b.additional_needs) == 500

    def test_special_characters(self, gen):
        b = gen.booking_with_special_characters()
        assert b.first_name == "José-María"
        assert b.last_name == "O'Connor-Smith"
        assert stay(b) == (1, 2)

    def test_sql_injection(self, gen):
        b = gen.booking_with_sql_injection()
        assert "DROP TABLE" in b.first_name
        assert b.last_name == "1' OR '1'='1"
        assert b.additional_needs == "<script>alert('xss')</script>"

    def test_explicit_booking(self, gen):
        b = gen.booking("Ann", "Lee", 10, False, TODAY, TODAY, "Lunch")
        assert b.booking_dates.check_in == b.booking_dates.check_out == TODAY


class TestWithField:

    @pytest.mark.parametrize("name", ["firstname", "firstName", "first_name", "FIRSTNAME"])
    def test_name_forms(self, gen, name):
        original = gen.minimal_booking()
        updated = gen.with_field(original, name, "Jane")
        assert updated.first_name == "Jane"

    @pytest.mark.parametrize("name, attr, value", [
        ("lastName", "last_name", "Roe"),
        ("totalPrice", "total_price", 999),
        ("depositPaid", "deposit_paid", False),
        ("additionalNeeds", "additional_needs", "Dinner"),
    ])
    def test_each_mutable_field(self, gen, name, attr, value):
        original = gen.minimal_booking()
        updated = gen.with_field(original, name, value)
        assert getattr(updated, attr) == value
        assert updated.model_dump(exclude={attr}) == original.model_dump(exclude={attr})

    def test_original_untouched(self, gen):
        original = gen.minimal_booking()
        gen.with_field(original, "firstname", "Jane")
        assert original.first_name == "John"

    @pytest.mark.parametrize("name", ["bookingdates", "checkin", "nickname", ""])
    def test_unknown_field(self, gen, name):
        with pytest.raises(UnknownBookingField) as exc_info:
            gen.with_field(gen.minimal_booking(), name, "x")
        assert exc_info.value.field == name
        assert isinstance(exc_info.value, KeyError)


class TestAuthVariants:

    def test_variants(self, gen):
        assert gen.valid_auth() == AuthRequest(username="admin", password="password123")
        assert gen.invalid_auth() == AuthRequest(username="invalid_user", password="wrong_password")
        assert gen.empty_auth() == AuthRequest(username="", password="")
        assert gen.empty_username_auth() == AuthRequest(username="", password="password123")
        assert gen.empty_password_auth() == AuthRequest(username="admin", password="")
        assert gen.null_auth() == AuthRequest()

    def test_configured_credentials(self):
        gen = BookingDataGenerator(username="ops", password="s3cret")
        assert gen.valid_auth() == AuthRequest(username="ops", password="s3cret")


def test_random_helpers_are_inclusive(gen):
    prices = {gen.random_price(1, 3) for _ in range(200)}
    assert prices == {1, 2, 3}
    for _ in range(50):
        d = gen.random_future_date(2, 4)
        assert TODAY + timedelta(days=2) <= d <= TODAY + timedelta(days=4)
