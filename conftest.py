import httpx
import pytest

from api_helpers import build_http_client
from data_factory import random_pet, random_user
from logging_helper import log_status
from pet_api import PetApiClient
from petstore_app import create_app
from settings import settings
from specs import init_specs
from store_api import StoreApiClient
from user_api import UserApiClient

# Read lag used by the tests that exercise the await-until helpers offline
LAG_SECONDS = 0.3


def _transport():
    if settings.is_live:
        return None
    return httpx.WSGITransport(app=create_app())


@pytest.fixture(scope="session")
def specs():
    log_status("info", f"Initializing API specifications for {settings.base_url} ({settings.target})")
    return init_specs()


@pytest.fixture(scope="session")
def http_client(specs):
    client = build_http_client(specs.request, transport=_transport())
    yield client
    client.close()


@pytest.fixture
def pet_api(http_client, specs):
    return PetApiClient(http_client, specs)


@pytest.fixture
def user_api(http_client, specs):
    return UserApiClient(http_client, specs)


@pytest.fixture
def store_api(http_client, specs):
    return StoreApiClient(http_client, specs)


@pytest.fixture
def lagging_http_client(specs):
    """A client whose service double hides every write for LAG_SECONDS."""
    if settings.is_live:
        pytest.skip("Needs the local service double (PETSTORE_TARGET=local)")
    app = create_app(propagation_delay=LAG_SECONDS)
    client = build_http_client(specs.request, transport=httpx.WSGITransport(app=app))
    yield client
    client.close()


def _cleanup(label, key, delete):
    log_status("info", f"Cleaning up {label}: {key}")
    try:
        response = delete(key)
    except httpx.HTTPError as e:
        log_status("error", f"Failed to delete {label} {key}: ", str(e))
        return
    # 404 means it is already gone, which is fine
    if response.status_code not in (200, 404):
        log_status("error", f"Unexpected {response.status_code} deleting {label} {key}: ", response.text)


@pytest.fixture
def created_pets(pet_api):
    """Pet ids created by the current test; deleted afterwards whatever the outcome."""
    pet_ids = []
    yield pet_ids
    for pet_id in pet_ids:
        _cleanup("pet", pet_id, pet_api.delete_pet_raw)


@pytest.fixture
def created_users(user_api):
    usernames = []
    yield usernames
    for username in usernames:
        _cleanup("user", username, user_api.delete_user_raw)


@pytest.fixture
def created_orders(store_api):
    order_ids = []
    yield order_ids
    for order_id in order_ids:
        _cleanup("order", order_id, store_api.delete_order_raw)


@pytest.fixture
def create_pet(pet_api, created_pets):
    """Factory: creates a random pet with the given status and registers it for cleanup."""
    def _create(status="available"):
        pet = random_pet(status)
        created_pets.append(pet.id)
        response = pet_api.add_pet(pet)
        assert response.json()["id"] == pet.id, (
            f"API assigned id {response.json()['id']} instead of requested {pet.id}"
        )
        return pet
    return _create


@pytest.fixture
def create_user(user_api, created_users):
    def _create():
        user = random_user()
        created_users.append(user.username)
        response = user_api.create_user(user)
        assert response.json()["message"] == str(user.id)
        return user
    return _create
