import random
from datetime import date, timedelta
from typing import Any, Optional

from faker import Faker

from booker.config import DEFAULT_PASSWORD, DEFAULT_USERNAME
from booker.exceptions import UnknownBookingField
from booker.models import AuthRequest, Booking, BookingDates

ADDITIONAL_NEEDS = ["Breakfast", "Lunch", "Dinner", "Late checkout", "Extra towels", None]

MAX_INT = 2**31 - 1

MUTABLE_FIELDS = {
    "firstname": "first_name",
    "lastname": "last_name",
    "totalprice": "total_price",
    "depositpaid": "deposit_paid",
    "additionalneeds": "additional_needs",
}


def _field_key(name: str) -> str:
    return name.replace("_", "").lower()


class BookingDataGenerator:
    """
    Builds Booking and AuthRequest payloads for the scenario tests.

    Random policies draw from one seedable source, so a fixed `seed` replays
    the same payloads. All dates are relative to `today`.
    """

    def __init__(self, seed: Optional[int] = None, today: Optional[date] = None,
                 username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD):
        self._rng = random.Random(seed)
        self._faker = Faker()
        if seed is not None:
            self._faker.seed_instance(seed)
        self._today = today
        self._username = username
        self._password = password

    @property
    def today(self) -> date:
        return self._today or date.today()

    def _days(self, n: int) -> date:
        return self.today + timedelta(days=n)

    def _between(self, low: int, high: int) -> int:
        """Random int in [low, high)."""
        return self._rng.randrange(low, high)

    def booking(self, first_name, last_name, total_price, deposit_paid,
                check_in: date, check_out: date, additional_needs=None) -> Booking:
        return Booking(
            first_name=first_name,
            last_name=last_name,
            total_price=total_price,
            deposit_paid=deposit_paid,
            booking_dates=BookingDates(check_in=check_in, check_out=check_out),
            additional_needs=additional_needs,
        )

    def random_booking(self) -> Booking:
        check_in = self._days(self._between(1, 30))
        check_out = check_in + timedelta(days=self._between(1, 14))
        return self.booking(
            self._faker.first_name(),
            self._faker.last_name(),
            self._between(50, 2000),
            self._rng.random() < 0.5,
            check_in,
            check_out,
            self._rng.choice(ADDITIONAL_NEEDS),
        )

    def invalid_booking(self) -> Booking:
        check_in = self._days(10)
        return self.booking("", "", -100, None, check_in, check_in - timedelta(days=5),
                            "Invalid booking data")

    def booking_with_invalid_dates(self) -> Booking:
        check_in = self._days(10)
        return self.booking(
            self._faker.first_name(),
            self._faker.last_name(),
            self._between(50, 2000),
            self._rng.random() < 0.5,
            check_in,
            check_in - timedelta(days=5),
            self._faker.sentence(),
        )

    def booking_with_same_dates(self) -> Booking:
        same = self._days(5)
        return self.booking(
            self._faker.first_name(),
            self._faker.last_name(),
            self._between(50, 500),
            self._rng.random() < 0.5,
            same,
            same,
            "Same day booking",
        )

    def booking_with_past_dates(self) -> Booking:
        check_in = self._days(-self._between(5, 30))
        return self.booking(
            self._faker.first_name(),
            self._faker.last_name(),
            self._between(50, 1000),
            self._rng.random() < 0.5,
            check_in,
            check_in + timedelta(days=self._between(1, 7)),
            "Historical booking",
        )

    def booking_with_future_dates(self) -> Booking:
        # 1 to 3 years out
        check_in = self._days(self._between(365, 1095))
        return self.booking(
            self._faker.first_name(),
            self._faker.last_name(),
            self._between(100, 3000),
            self._rng.random() < 0.5,
            check_in,
            check_in + timedelta(days=self._between(1, 21)),
            "Future booking",
        )

    def minimal_booking(self) -> Booking:
        check_in = self._days(1)
        return self.booking("John", "Doe", 100, True, check_in, check_in + timedelta(days=1))

    def booking_with_extreme_values(self) -> Booking:
        check_in = self._days(1)
        return self.booking("A" * 100, "B" * 100, MAX_INT, True,
                            check_in, check_in + timedelta(days=1), "X" * 500)

    def booking_with_special_characters(self) -> Booking:
        check_in = self._days(1)
        return self.booking("José-María", "O'Connor-Smith", 150, False,
                            check_in, check_in + timedelta(days=2),
                            "Special chars: @#$%^&*()_+{}|:<>?[]\\;'\",./")

    def booking_with_sql_injection(self) -> Booking:
        check_in = self._days(1)
        return self.booking("'; DROP TABLE bookings; --", "1' OR '1'='1", 100, True,
                            check_in, check_in + timedelta(days=1),
                            "<script>alert('xss')</script>")

    def with_field(self, original: Booking, field: str, value: Any) -> Booking:
        """
        Copy of `original` with one top-level field replaced. Accepts
        `firstName`, `first_name` or `firstname` alike.
        """
        attr = MUTABLE_FIELDS.get(_field_key(field))
        if attr is None:
            raise UnknownBookingField(field)
        return original.model_copy(update={attr: value}, deep=True)

    def random_price(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def random_future_date(self, min_days: int, max_days: int) -> date:
        return self._days(self._rng.randint(min_days, max_days))

    def valid_auth(self) -> AuthRequest:
        return AuthRequest(username=self._username, password=self._password)

    def invalid_auth(self) -> AuthRequest:
        return AuthRequest(username="invalid_user", password="wrong_password")

    def empty_auth(self) -> AuthRequest:
        return AuthRequest(username="", password="")

    def empty_username_auth(self) -> AuthRequest:
        return AuthRequest(username="", password=self._password)

    def empty_password_auth(self) -> AuthRequest:
        return AuthRequest(username=self._username, password="")

    def null_auth(self) -> AuthRequest:
        return AuthRequest(username=None, password=None)
