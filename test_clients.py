import json

import httpx
import pytest

from api_helpers import ContractViolation, build_http_client
from models import Order, Pet, User
from pet_api import PetApiClient
from polling import AwaitTimeoutError
from specs import init_specs
from store_api import StoreApiClient
from user_api import UserApiClient


class ScriptedService:
    """
    Answers each (method, path) with the next scripted response; the last one repeats.
    Records every request so tests can check what was sent.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, *responses):
        self.routes[(method, path)] = list(responses)
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(500, json={"message": "unscripted"})
        template = queue.pop(0) if len(queue) > 1 else queue[0]
        # Fresh object per exchange; the client binds each response to its request
        return httpx.Response(template.status_code, headers=template.headers, content=template.content)

    def count(self, method, path):
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def service():
    return ScriptedService()


@pytest.fixture
def client_factory(service):
    specs = init_specs("http://petstore.test/v2")
    http = build_http_client(specs.request, transport=httpx.MockTransport(service))

    def _make(cls):
        return cls(http, specs)

    yield _make
    http.close()


def test_add_pet_sends_camel_case_body(service, client_factory):
    service.on("POST", "/v2/pet", httpx.Response(200, json={"id": 5, "name": "Rex"}))
    pet = Pet(id=5, name="Rex", photo_urls=["http://x/a.jpg"], status="available")

    client_factory(PetApiClient).add_pet(pet)

    sent = json.loads(service.requests[0].content)
    assert sent == {"id": 5, "name": "Rex", "photoUrls": ["http://x/a.jpg"], "tags": [], "status": "available"}


def test_add_pet_raises_contract_violation_on_error_status(service, client_factory):
    service.on("POST", "/v2/pet", httpx.Response(500, json={"code": 500, "type": "unknown", "message": "something bad happened"}))

    with pytest.raises(ContractViolation) as exc_info:
        client_factory(PetApiClient).add_pet(Pet(id=1, name="Rex"))

    assert exc_info.value.expected_status == 200
    assert exc_info.value.actual_status == 500


def test_raw_variant_never_asserts(service, client_factory):
    service.on("POST", "/v2/pet", httpx.Response(405, json={"message": "Invalid input"}))

    response = client_factory(PetApiClient).add_pet_raw(Pet(name="Rex"))

    assert response.status_code == 405
    assert service.count("POST", "/v2/pet") == 1


def test_get_pet_by_id_waits_for_propagation(service, client_factory):
    service.on(
        "GET", "/v2/pet/7",
        httpx.Response(404, json={"code": 1, "type": "error", "message": "Pet not found"}),
        httpx.Response(404, json={"code": 1, "type": "error", "message": "Pet not found"}),
        httpx.Response(200, json={"id": 7, "name": "Rex"}),
    )

    response = client_factory(PetApiClient).get_pet_by_id(7, timeout=5, interval=0.01)

    assert response.json()["name"] == "Rex"
    assert service.count("GET", "/v2/pet/7") == 3


def test_expecting_error_times_out_when_pet_never_disappears(service, client_factory):
    service.on("GET", "/v2/pet/7", httpx.Response(200, json={"id": 7, "name": "Rex"}))

    with pytest.raises(AwaitTimeoutError) as exc_info:
        client_factory(PetApiClient).get_pet_by_id_expecting_error(7, timeout=0.05, interval=0.01)

    assert exc_info.value.last_observation.status_code == 200
    assert "GET /pet/7 returns 404" in str(exc_info.value)


def test_wait_for_pet_update_checks_every_field(service, client_factory):
    service.on(
        "GET", "/v2/pet/7",
        httpx.Response(200, json={"id": 7, "name": "Old", "category": {"name": "Dogs"}}),
        httpx.Response(200, json={"id": 7, "name": "New", "category": {"name": "Cats"}}),
        httpx.Response(200, json={"id": 7, "name": "New", "category": {"name": "Dogs"}}),
    )

    response = client_factory(PetApiClient).wait_for_pet_update(
        7, {"name": "New", "category.name": "Dogs"}, timeout=5, interval=0.01
    )

    assert response.json()["category"]["name"] == "Dogs"
    assert service.count("GET", "/v2/pet/7") == 3


def test_find_pets_by_status_sends_query(service, client_factory):
    service.on("GET", "/v2/pet/findByStatus", httpx.Response(200, json=[]))

    client_factory(PetApiClient).find_pets_by_status("sold")

    assert service.requests[0].url.params["status"] == "sold"


def test_login_requires_session_message(service, client_factory):
    service.on("GET", "/v2/user/login", httpx.Response(200, json={"code": 200, "type": "unknown", "message": "welcome"}))

    with pytest.raises(ContractViolation, match="logged in user session:"):
        client_factory(UserApiClient).login_user("alice", "secret")


def test_login_expecting_error_omits_missing_parameters(service, client_factory):
    service.on("GET", "/v2/user/login", httpx.Response(400, json={"message": "Missing required parameters"}))

    response = client_factory(UserApiClient).login_user_expecting_error(None, "secret", 400)

    assert response.status_code == 400
    params = service.requests[0].url.params
    assert "username" not in params
    assert params["password"] == "secret"


def test_login_expecting_error_reports_unexpected_success(service, client_factory):
    service.on("GET", "/v2/user/login", httpx.Response(200, json={"message": "logged in user session:1"}))

    with pytest.raises(ContractViolation) as exc_info:
        client_factory(UserApiClient).login_user_expecting_error(None, "secret", 400)

    assert exc_info.value.expected_status == 400
    assert exc_info.value.actual_status == 200


def test_logout_requires_ok_message(service, client_factory):
    service.on("GET", "/v2/user/logout", httpx.Response(200, json={"code": 200, "message": "bye"}))

    with pytest.raises(ContractViolation, match="'ok'"):
        client_factory(UserApiClient).logout_user()


def test_update_user_targets_username_path(service, client_factory):
    service.on("PUT", "/v2/user/alice", httpx.Response(404), httpx.Response(200, json={"code": 200, "message": "1"}))

    response = client_factory(UserApiClient).update_user(User(id=1, username="alice", first_name="Kate"), interval=0.01)

    assert response.status_code == 200
    assert service.count("PUT", "/v2/user/alice") == 2
    assert json.loads(service.requests[-1].content)["firstName"] == "Kate"


def test_create_users_with_list_keeps_order(service, client_factory):
    service.on("POST", "/v2/user/createWithList", httpx.Response(200, json={"code": 200, "message": "ok"}))
    users = [User(id=i, username=f"user{i}") for i in (3, 1, 2)]

    client_factory(UserApiClient).create_users_with_list(users)

    sent = json.loads(service.requests[0].content)
    assert [u["username"] for u in sent] == ["user3", "user1", "user2"]


def test_order_pet_id_predicate_waits_for_matching_pet(service, client_factory):
    service.on(
        "GET", "/v2/store/order/77",
        httpx.Response(200, json={"id": 77, "petId": 1}),
        httpx.Response(200, json={"id": 77, "petId": 12345}),
    )

    response = client_factory(StoreApiClient).get_order_by_id_and_verify_pet_id(77, 12345, interval=0.01)

    assert response.json()["petId"] == 12345


def test_inventory_count_treats_unknown_status_as_zero(service, client_factory):
    service.on("GET", "/v2/store/inventory", httpx.Response(200, json={"available": 3}))

    client_factory(StoreApiClient).get_inventory_and_verify_status_count("brand-new", 0)

    with pytest.raises(AwaitTimeoutError):
        client_factory(StoreApiClient).get_inventory_and_verify_status_count("brand-new", 1, timeout=0.05, interval=0.01)


def test_place_order_serializes_order(service, client_factory):
    order = Order(id=77, pet_id=12345, quantity=1, ship_date="2024-05-01T10:00:00.000+0000", status="placed", complete=False)
    service.on("POST", "/v2/store/order", httpx.Response(200, json=order.to_dict()))

    response = client_factory(StoreApiClient).place_order(order)

    assert json.loads(service.requests[0].content)["petId"] == 12345
    assert Order.from_dict(response.json()) == order


def test_order_raw_and_awaited_reads(service, client_factory):
    service.on("POST", "/v2/store/order", httpx.Response(400, json={"code": 400, "message": "Invalid Order"}))
    service.on(
        "GET", "/v2/store/order/9",
        httpx.Response(404, json={"code": 1, "type": "error", "message": "Order not found"}),
        httpx.Response(200, json={"id": 9, "petId": 1}),
    )
    store = client_factory(StoreApiClient)

    assert store.place_order_raw(Order(id=9)).status_code == 400
    assert store.get_order_by_id(9, interval=0.01).json()["id"] == 9
    assert service.count("GET", "/v2/store/order/9") == 2


def test_keys_are_escaped_into_a_single_segment(service, client_factory):
    users = client_factory(UserApiClient)

    users.delete_user_raw("x/../bob")
    users.get_user_by_username_raw("john#1")
    users.update_user_raw(User(username="a b?c"))
    client_factory(StoreApiClient).get_order_by_id_raw(-1)

    assert [r.url.raw_path for r in service.requests] == [
        b"/v2/user/x%2F..%2Fbob",
        b"/v2/user/john%231",
        b"/v2/user/a%20b%3Fc",
        b"/v2/store/order/-1",
    ]
