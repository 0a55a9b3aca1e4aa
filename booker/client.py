import logging
from typing import Any, Dict, Optional, Union

import httpx

from booker import endpoints
from booker.audit import append_exchange
from booker.config import Configuration
from booker.models import WireModel

logger = logging.getLogger(__name__)

JSON = "application/json"

Body = Union[WireModel, Dict[str, Any], None]

_NO_BODY = object()


def _payload(body: Any) -> Any:
    if isinstance(body, WireModel):
        return body.to_payload()
    return body


class BookerClient:
    """
    Shapes and sends requests to the booking API.

    Status codes are never interpreted here: every call returns the raw
    httpx.Response and transport errors propagate to the caller.
    """

    def __init__(self, config: Configuration, http: Optional[httpx.Client] = None):
        self.config = config
        self._owns_http = http is None
        self.timeout = httpx.Timeout(
            config.socket_timeout_ms / 1000.0,
            connect=config.connection_timeout_ms / 1000.0,
        )
        if http is None:
            http = httpx.Client(base_url=config.base_url, timeout=self.timeout)
        self._http = http

    @staticmethod
    def _log_request(request: httpx.Request) -> None:
        logger.info("--> %s %s", request.method, request.url)
        if request.content:
            logger.info("--> body %s", request.content.decode("utf-8", errors="replace"))

    @staticmethod
    def _log_response(response: httpx.Response) -> None:
        response.read()
        logger.info("<-- %s %s %s", response.status_code, response.request.method, response.request.url)
        if response.content:
            logger.info("<-- body %s", response.text)

    def _audit_response(self, response: httpx.Response) -> None:
        append_exchange(self.config.audit_file, response)

    @property
    def base_url(self) -> str:
        return str(self._http.base_url)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "BookerClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def base_request(self, method: str, path: str, body: Any = _NO_BODY,
                     params: Optional[Dict[str, Any]] = None,
                     headers: Optional[Dict[str, str]] = None) -> httpx.Request:
        merged = {"Content-Type": JSON, "Accept": JSON}
        if headers:
            merged.update(headers)
        kwargs: Dict[str, Any] = {}
        if body is not _NO_BODY:
            kwargs["json"] = _payload(body)
        if params:
            kwargs["params"] = {k: v for k, v in params.items() if v is not None}
        return self._http.build_request(method, path, headers=merged, timeout=self.timeout, **kwargs)

    def authenticated_request(self, token: str, method: str, path: str, body: Any = _NO_BODY,
                              params: Optional[Dict[str, Any]] = None) -> httpx.Request:
        return self.base_request(method, path, body, params,
                                 headers={"Cookie": f"{endpoints.TOKEN_COOKIE}={token}"})

    def basic_auth_request(self, username: str, password: str, method: str, path: str,
                           body: Any = _NO_BODY, params: Optional[Dict[str, Any]] = None) -> httpx.Request:
        request = self.base_request(method, path, body, params)
        return next(httpx.BasicAuth(username, password).sync_auth_flow(request))

    def send(self, request: httpx.Request) -> httpx.Response:
        # logging and audit stay here so a borrowed http client is never mutated
        if self.config.logging_enabled:
            self._log_request(request)
        response = self._http.send(request)
        if self.config.logging_enabled:
            self._log_response(response)
        if self.config.audit_file:
            self._audit_response(response)
        return response

    def _call(self, method: str, path: str, body: Any = _NO_BODY, token: Optional[str] = None,
              params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        if token is None:
            request = self.base_request(method, path, body, params)
        else:
            request = self.authenticated_request(token, method, path, body, params)
        return self.send(request)

    def health_check(self) -> httpx.Response:
        return self._call("GET", endpoints.PING)

    def authenticate(self, auth_request: Any = _NO_BODY) -> httpx.Response:
        """POST /auth. Pass nothing to send the request with no body at all."""
        return self._call("POST", endpoints.AUTH, auth_request)

    def list_bookings(self, firstname: Optional[str] = None, lastname: Optional[str] = None,
                      checkin: Optional[str] = None, checkout: Optional[str] = None) -> httpx.Response:
        params = {
            endpoints.FIRSTNAME_PARAM: firstname,
            endpoints.LASTNAME_PARAM: lastname,
            endpoints.CHECKIN_PARAM: checkin,
            endpoints.CHECKOUT_PARAM: checkout,
        }
        return self._call("GET", endpoints.BOOKING, params=params)

    def get_booking(self, booking_id) -> httpx.Response:
        return self._call("GET", endpoints.booking_path(booking_id))

    def create_booking(self, booking: Body) -> httpx.Response:
        return self._call("POST", endpoints.BOOKING, booking)

    def update_booking(self, booking_id, booking: Body, token: Optional[str] = None) -> httpx.Response:
        return self._call("PUT", endpoints.booking_path(booking_id), booking, token)

    def partial_update_booking(self, booking_id, fields: Body, token: Optional[str] = None) -> httpx.Response:
        return self._call("PATCH", endpoints.booking_path(booking_id), fields, token)

    def delete_booking(self, booking_id, token: Optional[str] = None) -> httpx.Response:
        return self._call("DELETE", endpoints.booking_path(booking_id), token=token)
