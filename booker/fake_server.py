"""
In-memory stand-in for the restful-booker API.

Reproduces the status codes and bodies the scenario tests assert on, so the
suite can run without network access:

    client = BookerClient(config, http=TestClient(create_app()))
"""
import json
import threading
import uuid
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, ValidationError

from booker.config import DEFAULT_PASSWORD, DEFAULT_USERNAME

BAD_CREDENTIALS = {"reason": "Bad credentials"}

basic = HTTPBasic(auto_error=False)


class StoredDates(BaseModel):
    model_config = ConfigDict(extra="ignore")

    checkin: date
    checkout: date


class StoredBooking(BaseModel):
    """A booking as the API accepts it: every field but additionalneeds is required."""
    model_config = ConfigDict(extra="ignore")

    firstname: StrictStr
    lastname: StrictStr
    totalprice: StrictInt
    depositpaid: StrictBool
    bookingdates: StoredDates
    additionalneeds: Optional[StrictStr] = None


class PartialDates(BaseModel):
    model_config = ConfigDict(extra="ignore")

    checkin: Optional[date] = None
    checkout: Optional[date] = None


class PartialBooking(BaseModel):
    model_config = ConfigDict(extra="ignore")

    firstname: Optional[StrictStr] = None
    lastname: Optional[StrictStr] = None
    totalprice: Optional[StrictInt] = None
    depositpaid: Optional[StrictBool] = None
    bookingdates: Optional[PartialDates] = None
    additionalneeds: Optional[StrictStr] = None


def text(status_code: int, body: str) -> PlainTextResponse:
    return PlainTextResponse(body, status_code=status_code)


def parse_date(value: str) -> Optional[date]:
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


class BookingStore:
    """Bookings and issued tokens for one app instance. Thread-safe via its lock."""

    def __init__(self, username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD):
        self.username = username
        self.password = password
        self.bookings: Dict[int, Dict[str, Any]] = {}
        self.tokens = set()
        self._next_id = 1
        self._lock = threading.Lock()

    def issue_token(self) -> str:
        token = uuid.uuid4().hex[:15]
        with self._lock:
            self.tokens.add(token)
        return token

    def is_authorized(self, request: Request, credentials: Optional[HTTPBasicCredentials]) -> bool:
        token = request.cookies.get("token")
        if token and token in self.tokens:
            return True
        if credentials is None:
            return False
        return credentials.username == self.username and credentials.password == self.password

    def add(self, booking: Dict[str, Any]) -> int:
        with self._lock:
            booking_id = self._next_id
            self._next_id += 1
            self.bookings[booking_id] = booking
        return booking_id

    def find(self, booking_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.bookings.get(int(booking_id))
        except ValueError:
            return None

    def replace(self, booking_id: str, booking: Dict[str, Any]) -> None:
        with self._lock:
            self.bookings[int(booking_id)] = booking

    def remove(self, booking_id: str) -> None:
        with self._lock:
            self.bookings.pop(int(booking_id), None)

    def search(self, firstname=None, lastname=None, checkin: Optional[date] = None,
               checkout: Optional[date] = None) -> List[int]:
        found = []
        for booking_id, b in sorted(self.bookings.items()):
            if firstname is not None and b["firstname"] != firstname:
                continue
            if lastname is not None and b["lastname"] != lastname:
                continue
            dates = b["bookingdates"]
            if checkin is not None and date.fromisoformat(dates["checkin"]) < checkin:
                continue
            if checkout is not None and date.fromisoformat(dates["checkout"]) < checkout:
                continue
            found.append(booking_id)
        return found


async def basic_credentials(request: Request) -> Optional[HTTPBasicCredentials]:
    # malformed Basic headers are refused with 403 like missing ones
    try:
        return await basic(request)
    except HTTPException:
        return None


async def read_json(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        raise ValueError("empty body")
    return json.loads(raw)


def create_app(initial: Optional[Iterable[Dict[str, Any]]] = None,
               username: str = DEFAULT_USERNAME, password: str = DEFAULT_PASSWORD) -> FastAPI:
    app = FastAPI(title="restful-booker stand-in")
    store = BookingStore(username, password)
    app.state.store = store

    for payload in initial or []:
        store.add(StoredBooking.model_validate(payload).model_dump(mode="json"))

    @app.get("/ping")
    def ping():
        return text(201, "Created")

    @app.post("/auth")
    async def auth(request: Request):
        try:
            body = await read_json(request)
        except ValueError:
            return text(500, "Internal Server Error")
        if not isinstance(body, dict):
            return text(500, "Internal Server Error")
        if body.get("username") == store.username and body.get("password") == store.password:
            return {"token": store.issue_token()}
        return BAD_CREDENTIALS

    @app.get("/booking")
    def list_bookings(request: Request):
        query = request.query_params
        checkin = checkout = None
        if "checkin" in query:
            checkin = parse_date(query["checkin"])
            if checkin is None:
                return text(500, "Internal Server Error")
        if "checkout" in query:
            checkout = parse_date(query["checkout"])
            if checkout is None:
                return text(500, "Internal Server Error")
        ids = store.search(query.get("firstname"), query.get("lastname"), checkin, checkout)
        return [{"bookingid": i} for i in ids]

    @app.get("/booking/{booking_id}")
    def get_booking(booking_id: str):
        booking = store.find(booking_id)
        if booking is None:
            return text(404, "Not Found")
        return booking

    @app.post("/booking")
    async def create_booking(request: Request):
        try:
            booking = StoredBooking.model_validate(await read_json(request))
        except (ValueError, ValidationError):
            return text(500, "Internal Server Error")
        stored = booking.model_dump(mode="json")
        booking_id = store.add(stored)
        return {"bookingid": booking_id, "booking": stored}

    @app.put("/booking/{booking_id}")
    async def update_booking(booking_id: str, request: Request,
            credentials: Optional[HTTPBasicCredentials] = Depends(basic_credentials)):
        if not store.is_authorized(request, credentials):
            return text(403, "Forbidden")
        if store.find(booking_id) is None:
            return text(405, "Method Not Allowed")
        try:
            booking = StoredBooking.model_validate(await read_json(request))
        except (ValueError, ValidationError):
            return text(400, "Bad Request")
        stored = booking.model_dump(mode="json")
        store.replace(booking_id, stored)
        return stored

    @app.patch("/booking/{booking_id}")
    async def partial_update_booking(booking_id: str, request: Request,
            credentials: Optional[HTTPBasicCredentials] = Depends(basic_credentials)):
        if not store.is_authorized(request, credentials):
            return text(403, "Forbidden")
        existing = store.find(booking_id)
        if existing is None:
            return text(405, "Method Not Allowed")
        try:
            patch = PartialBooking.model_validate(await read_json(request))
        except (ValueError, ValidationError):
            return text(400, "Bad Request")
        updated = dict(existing)
        changes = patch.model_dump(mode="json", exclude_unset=True)
        dates = changes.pop("bookingdates", None)
        updated.update({k: v for k, v in changes.items() if v is not None or k == "additionalneeds"})
        if dates:
            merged = dict(existing["bookingdates"])
            merged.update({k: v for k, v in dates.items() if v is not None})
            updated["bookingdates"] = merged
        store.replace(booking_id, updated)
        return updated

    @app.delete("/booking/{booking_id}")
    def delete_booking(booking_id: str, request: Request,
            credentials: Optional[HTTPBasicCredentials] = Depends(basic_credentials)):
        if not store.is_authorized(request, credentials):
            return text(403, "Forbidden")
        if store.find(booking_id) is None:
            return text(405, "Method Not Allowed")
        store.remove(booking_id)
        return text(201, "Created")

    return app
