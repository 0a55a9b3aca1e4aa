PING = "/ping"
AUTH = "/auth"
BOOKING = "/booking"
BOOKING_BY_ID = "/booking/{id}"

FIRSTNAME_PARAM = "firstname"
LASTNAME_PARAM = "lastname"
CHECKIN_PARAM = "checkin"
CHECKOUT_PARAM = "checkout"

TOKEN_COOKIE = "token"


def booking_path(booking_id) -> str:
    return BOOKING_BY_ID.format(id=booking_id)
