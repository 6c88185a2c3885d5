import copy
import os

# Local HS256 tokens instead of Firebase ID tokens; must be set before farmstand is imported
os.environ["AUTH_PROVIDER"] = "jwt"
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"
os.environ["USE_CLOUD_LOGGING"] = "false"
os.environ["PUBLIC_BASE_URL"] = "http://localhost:3000"
os.environ["QR_CODE_WIDTH"] = "500"
os.environ["DEFAULT_CENTER_LAT"] = "41.9"
os.environ["DEFAULT_CENTER_LNG"] = "-72.0"

import httpx
import pytest
from fastapi.testclient import TestClient

from farmstand.core.exceptions import StoreUnavailable
from farmstand.core.firebase import get_store
from farmstand.core.rate_limit import limiter
from farmstand.core.security import Identity, create_access_token
from farmstand.main import create_app
from farmstand.MAP.google_maps import GoogleMapsClient, get_maps
from farmstand.VENDORS.records import VendorRecords


class InMemoryDocumentStore:
    """Document store double with the same get / merge_patch / list_all contract as Firestore."""

    def __init__(self):
        self.collections = {}
        self.writes = []
        self.fail_writes = False
        self.fail_reads = False

    def get(self, collection, doc_id):
        if self.fail_reads:
            raise StoreUnavailable("Could not load the vendor record. Please try again.")
        doc = self.collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    def merge_patch(self, collection, doc_id, partial):
        if self.fail_writes:
            raise StoreUnavailable("Could not save your changes. Please try again.")
        doc = self.collections.setdefault(collection, {}).setdefault(doc_id, {})
        for key, value in partial.items():
            doc[key] = copy.deepcopy(value)
        self.writes.append((collection, doc_id, copy.deepcopy(partial)))

    def list_all(self, collection):
        if self.fail_reads:
            raise StoreUnavailable("Could not load vendors. Please try again.")
        return [
            {"id": doc_id, **copy.deepcopy(doc)}
            for doc_id, doc in self.collections.get(collection, {}).items()
        ]

    def raw(self, doc_id, collection="vendors"):
        return copy.deepcopy(self.collections[collection][doc_id])


# ---------------------------
# Fake Google Maps web services
# ---------------------------
GEOCODES = {
    "12 Maple St": (41.9, -72.0),
    "40 Orchard Rd": (41.95, -72.1),
    "1 Far Field Ln": (42.5, -71.5),
}
UNROUTABLE = "10.0,10.0"


def google_handler(request: httpx.Request) -> httpx.Response:
    params = request.url.params
    path = request.url.path

    if path.endswith("/geocode/json"):
        coords = GEOCODES.get(params.get("address"))
        if coords is None:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
        lat, lng = coords
        return httpx.Response(200, json={
            "status": "OK",
            "results": [{"geometry": {"location": {"lat": lat, "lng": lng}}}],
        })

    if path.endswith("/directions/json"):
        if params.get("destination") == UNROUTABLE:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "routes": []})
        return httpx.Response(200, json={
            "status": "OK",
            "routes": [{
                "overview_polyline": {"points": "a~l~Fjk~uOwHJy@P"},
                "legs": [{
                    "distance": {"text": "5.2 km"},
                    "duration": {"text": "9 mins"},
                    "steps": [
                        {"html_instructions": "Head <b>north</b> on Main St",
                         "distance": {"text": "1.0 km"}, "duration": {"text": "2 mins"}},
                        {"html_instructions": "Turn <b>left</b> onto Maple St",
                         "distance": {"text": "4.2 km"}, "duration": {"text": "7 mins"}},
                    ],
                }],
            }],
        })

    if path.endswith("/place/autocomplete/json"):
        text = params.get("input", "")
        predictions = [
            {"place_id": "p-1", "description": "12 Maple St, Pomfret, CT, USA"},
            {"place_id": "p-2", "description": "12 Maple Ave, Putnam, CT, USA"},
        ]
        matches = [p for p in predictions if p["description"].lower().startswith(text.lower())]
        return httpx.Response(200, json={"status": "OK" if matches else "ZERO_RESULTS", "predictions": matches})

    return httpx.Response(404, json={"status": "NOT_FOUND"})


def make_maps(handler=google_handler) -> GoogleMapsClient:
    http = httpx.AsyncClient(base_url="https://maps.test/api", transport=httpx.MockTransport(handler))
    return GoogleMapsClient(api_key="test-key", http=http)


# ---------------------------
# Fixtures
# ---------------------------
@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def records(store):
    return VendorRecords(store)


@pytest.fixture
def identity():
    return Identity(id="vendor-1", email="stand@example.com", email_verified=True)


@pytest.fixture
def maps():
    return make_maps()


@pytest.fixture
def make_maps_with():
    return make_maps


def auth_headers(identity: Identity) -> dict:
    return {"Authorization": f"Bearer {create_access_token(identity)}"}


@pytest.fixture
def make_headers():
    return auth_headers


@pytest.fixture
def headers(identity):
    return auth_headers(identity)


@pytest.fixture
def client(store, maps):
    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_maps] = lambda: maps
    with TestClient(app) as c:
        yield c
