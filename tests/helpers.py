"""Helper utilities for tests."""

from typing import Any, Dict, List, Tuple

from aiohttp import web

ACCOUNT_ID = "42"
IBAN = "CZ6508000000000123456789"


class FakeBank:
    """In-process stand-in for the CSAS token endpoint and netbanking API.

    Netbanking responses are registered per path relative to the v3 base;
    unregistered paths answer 404.
    """

    def __init__(self):
        self.host = ""
        self.token_response: Tuple[int, Any] = (200, {"access_token": "access-1", "token_type": "bearer"})
        self.responses: Dict[str, Tuple[int, Any]] = {}
        self.token_requests: List[Dict[str, str]] = []
        self.calls: List[str] = []
        self.queries: Dict[str, Dict[str, str]] = {}
        self.headers: Dict[str, Any] = {}

    def respond(self, path: str, body: Any, status: int = 200) -> None:
        self.responses[path] = (status, body)

    async def _token(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.token_requests.append(dict(form))
        status, body = self.token_response
        return web.json_response(body, status=status)

    async def _netbanking(self, request: web.Request) -> web.Response:
        path = request.match_info["path"]
        self.calls.append(path)
        self.queries[path] = dict(request.query)
        self.headers[path] = request.headers.copy()
        if path not in self.responses:
            return web.json_response({"errors": [{"error": "NOT_FOUND"}]}, status=404)
        status, body = self.responses[path]
        return web.json_response(body, status=status)

    def make_app(self) -> web.Application:
        app = web.Application()
        app.add_routes([
            web.post("/widp/oauth2/token", self._token),
            web.get("/webapi/api/v3/netbanking/{path:.*}", self._netbanking),
        ])
        return app


def amount(value: str, precision: int = 2, currency: str = "CZK") -> Dict[str, Any]:
    return {"value": value, "precision": precision, "currency": currency}


def account_json(entity_id: str, number: str, iban: str, bank_code: str = "0800") -> Dict[str, Any]:
    return {
        "id": entity_id,
        "accountno": {"number": number, "bankCode": bank_code, "countryCode": "CZ", "cz-iban": iban},
    }


def reservation_json(value: str, created: str, merchant: str = "ALBERT") -> Dict[str, Any]:
    return {
        "amount": amount(value),
        "creationDate": created,
        "description": f"Card payment {merchant}",
        "merchantName": merchant,
        "merchantAddress": "Praha 1",
    }


def transaction_json(value: str, booked: str, vs: str = "1234") -> Dict[str, Any]:
    return {
        "amount": amount(value),
        "bookingDate": booked,
        "description": "Incoming payment",
        "variableSymbol": vs,
        "accountParty": {"accountPartyInfo": "19-123/0100", "accountPartyDescription": "Jan Novak"},
    }
