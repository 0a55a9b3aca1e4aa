import json
import logging

from booker.audit import exchange_entry
from booker.client import BookerClient
from booker.config import Configuration
from booker.data import BookingDataGenerator
from booker.exceptions import AuthenticationError
from booker.models import AuthResponse, BookingResponse

OUTPUT_FILE = "validation-output.json"


def _write(output: str, val) -> None:
    with open(output, "w", encoding="utf-8") as f:
        json.dump(val, f, ensure_ascii=False, indent=2)


def run_flow(config: Configuration, client: BookerClient = None, output: str = OUTPUT_FILE):
    if client is None:
        with BookerClient(config) as owned:
            return run_flow(config, owned, output)

    val = []
    data = BookingDataGenerator(username=config.auth_username, password=config.auth_password)

    r = client.health_check()
    val.append(exchange_entry(r))

    r = client.authenticate(data.valid_auth())
    val.append(exchange_entry(r))
    auth = AuthResponse.from_payload(r.json())
    if not auth.succeeded:
        _write(output, val)
        raise AuthenticationError(f"no token from /auth ({r.status_code}): {r.text}")
    token = auth.token

    booking = data.random_booking()
    r = client.create_booking(booking)
    val.append(exchange_entry(r))
    booking_id = BookingResponse.from_payload(r.json()).booking_id

    r = client.get_booking(booking_id)
    val.append(exchange_entry(r))

    r = client.update_booking(booking_id, data.random_booking(), token=token)
    val.append(exchange_entry(r))

    r = client.partial_update_booking(booking_id, {"firstname": "Updated"}, token=token)
    val.append(exchange_entry(r))

    r = client.delete_booking(booking_id, token=token)
    val.append(exchange_entry(r))

    _write(output, val)
    return val


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    config = Configuration.load()
    with BookerClient(config) as client:
        run_flow(config, client)
    print(f"Validation complete against {config.base_url}. See {OUTPUT_FILE}")
