import time
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from flask import Flask, Response, request
from flask_restx import Api, Namespace, Resource

from settings import settings


class LaggingStore:
    """
    Key/value store whose writes become readable only after `propagation_delay`
    seconds, the way the hosted pet store serves stale reads right after a write.

    Every key keeps a history of (visible_at, value); None marks a deletion.
    """

    def __init__(self, propagation_delay: float = 0.0, clock: Callable[[], float] = time.monotonic):
        self.propagation_delay = propagation_delay
        self.clock = clock
        self._history: Dict[Any, List[Tuple[float, Optional[dict]]]] = {}

    def write(self, key, value: Optional[dict]):
        now = self.clock()
        history = self._history.setdefault(key, [])
        history.append((now + self.propagation_delay, value))
        self._compact(key, now)

    def delete(self, key):
        self.write(key, None)

    def read(self, key) -> Optional[dict]:
        now = self.clock()
        self._compact(key, now)
        history = self._history.get(key)
        if history and history[0][0] <= now:
            return history[0][1]
        return None

    def _compact(self, key, now: float):
        # Only the newest visible entry and the pending ones can still be read
        history = self._history.get(key)
        if not history:
            return
        newest_visible = None
        for index, (visible_at, _) in enumerate(history):
            if visible_at <= now:
                newest_visible = index
        if newest_visible is None:
            return
        del history[:newest_visible]
        if len(history) == 1 and history[0][1] is None:
            del self._history[key]

    def values(self) -> Iterator[dict]:
        for key in list(self._history):
            value = self.read(key)
            if value is not None:
                yield value


class PetStoreData:
    def __init__(self, propagation_delay: float = 0.0, clock: Callable[[], float] = time.monotonic):
        self.pets = LaggingStore(propagation_delay, clock)
        self.orders = LaggingStore(propagation_delay, clock)
        self.users = LaggingStore(propagation_delay, clock)
        self._next_id = int(time.time() * 1000)

    def generate_id(self) -> int:
        self._next_id += 1
        return self._next_id


def api_message(code: int, type_: str, message: str) -> dict:
    return {"code": code, "type": type_, "message": message}


def _parse_id(raw: str) -> Optional[int]:
    try:
        return int(raw)
    except ValueError:
        return None


def _json_object(api: Api) -> dict:
    body = api.payload
    if not isinstance(body, dict):
        api.abort(400, "Invalid input")
    return dict(body)


def register_pet_routes(ns: Namespace, api: Api, data: PetStoreData):
    """
    Registers:
      POST   /pet
      PUT    /pet
      GET    /pet/findByStatus?status=a,b
      GET    /pet/<id>
      DELETE /pet/<id>
    """

    @ns.route("")
    class _Pets(Resource):
        @ns.doc("add_pet")
        def post(self):
            # No validation of name/photoUrls: the hosted service accepts both missing
            pet = _json_object(api)
            if not isinstance(pet.get("id"), int) or pet["id"] == 0:
                pet["id"] = data.generate_id()
            pet.setdefault("photoUrls", [])
            pet.setdefault("tags", [])
            data.pets.write(pet["id"], pet)
            return pet, 200

        @ns.doc("update_pet")
        def put(self):
            # Unknown ids are created instead of rejected with 404
            pet = _json_object(api)
            if not isinstance(pet.get("id"), int):
                pet["id"] = data.generate_id()
            pet.setdefault("photoUrls", [])
            pet.setdefault("tags", [])
            data.pets.write(pet["id"], pet)
            return pet, 200

    @ns.route("/findByStatus")
    @ns.param("status", "Comma separated status values")
    class _FindByStatus(Resource):
        @ns.doc("find_pets_by_status")
        def get(self):
            wanted = set()
            for value in request.args.getlist("status"):
                wanted.update(s.strip() for s in value.split(",") if s.strip())
            return [p for p in data.pets.values() if p.get("status") in wanted], 200

    @ns.route("/<string:pet_id>")
    @ns.response(404, "Pet not found")
    class _Pet(Resource):
        @ns.doc("get_pet")
        def get(self, pet_id):
            key = _parse_id(pet_id)
            if key is None:
                return api_message(404, "unknown", f"Invalid ID supplied: {pet_id}"), 404
            pet = data.pets.read(key)
            if pet is None:
                return api_message(1, "error", "Pet not found"), 404
            return pet, 200

        @ns.doc("delete_pet")
        def delete(self, pet_id):
            key = _parse_id(pet_id)
            if key is None or data.pets.read(key) is None:
                return Response(status=404)
            data.pets.delete(key)
            return api_message(200, "unknown", str(key)), 200


def register_store_routes(ns: Namespace, api: Api, data: PetStoreData):
    """
    Registers:
      GET    /store/inventory
      POST   /store/order
      GET    /store/order/<id>
      DELETE /store/order/<id>
    """

    @ns.route("/inventory")
    class _Inventory(Resource):
        @ns.doc("get_inventory")
        def get(self):
            counts: Dict[str, int] = {}
            for pet in data.pets.values():
                status = pet.get("status")
                if isinstance(status, str):
                    counts[status] = counts.get(status, 0) + 1
            return counts, 200

    @ns.route("/order")
    class _Orders(Resource):
        @ns.doc("place_order")
        def post(self):
            order = _json_object(api)
            if not isinstance(order.get("id"), int) or order["id"] == 0:
                order["id"] = data.generate_id()
            order.setdefault("complete", False)
            data.orders.write(order["id"], order)
            return order, 200

    @ns.route("/order/<string:order_id>")
    @ns.response(404, "Order not found")
    class _Order(Resource):
        @ns.doc("get_order")
        def get(self, order_id):
            key = _parse_id(order_id)
            order = data.orders.read(key) if key is not None else None
            if order is None:
                return api_message(1, "error", "Order not found"), 404
            return order, 200

        @ns.doc("delete_order")
        def delete(self, order_id):
            key = _parse_id(order_id)
            if key is None or data.orders.read(key) is None:
                return api_message(404, "unknown", "Order Not Found"), 404
            data.orders.delete(key)
            return api_message(200, "unknown", str(key)), 200


def register_user_routes(ns: Namespace, api: Api, data: PetStoreData):
    """
    Registers:
      POST   /user
      POST   /user/createWithList
      POST   /user/createWithArray
      GET    /user/login
      GET    /user/logout
      GET    /user/<username>
      PUT    /user/<username>
      DELETE /user/<username>
    """

    def _store_user(user: dict) -> dict:
        if not isinstance(user.get("id"), int) or user["id"] == 0:
            user["id"] = data.generate_id()
        data.users.write(user.get("username"), user)
        return user

    def _store_many():
        users = api.payload
        if not isinstance(users, list) or not all(isinstance(u, dict) for u in users):
            api.abort(400, "Expected a JSON array of users")
        for user in users:
            _store_user(dict(user))
        return api_message(200, "unknown", "ok"), 200

    @ns.route("")
    class _Users(Resource):
        @ns.doc("create_user")
        def post(self):
            # Empty usernames and malformed emails are accepted, matching the hosted service
            user = _store_user(_json_object(api))
            return api_message(200, "unknown", str(user["id"])), 200

    @ns.route("/createWithList")
    class _CreateWithList(Resource):
        @ns.doc("create_users_with_list")
        def post(self):
            return _store_many()

    @ns.route("/createWithArray")
    class _CreateWithArray(Resource):
        @ns.doc("create_users_with_array")
        def post(self):
            return _store_many()

    @ns.route("/login")
    class _Login(Resource):
        @ns.doc("login_user")
        def get(self):
            # Missing username/password still "log in"
            session = int(time.time() * 1000)
            headers = {"X-Rate-Limit": "5000", "X-Expires-After": time.strftime("%a %b %d %H:%M:%S UTC %Y", time.gmtime(time.time() + 3600))}
            return api_message(200, "unknown", f"logged in user session:{session}"), 200, headers

    @ns.route("/logout")
    class _Logout(Resource):
        @ns.doc("logout_user")
        def get(self):
            return api_message(200, "unknown", "ok"), 200

    # Escaped "/" in a username reaches the app decoded
    @ns.route("/<path:username>")
    @ns.response(404, "User not found")
    class _User(Resource):
        @ns.doc("get_user")
        def get(self, username):
            user = data.users.read(username)
            if user is None:
                return api_message(1, "error", "User not found"), 404
            return user, 200

        @ns.doc("update_user")
        def put(self, username):
            # Updating an unknown user creates it and answers 200
            user = _json_object(api)
            if not isinstance(user.get("id"), int) or user["id"] == 0:
                existing = data.users.read(username) or {}
                user["id"] = existing.get("id") or data.generate_id()
            data.users.write(username, user)
            return api_message(200, "unknown", str(user["id"])), 200

        @ns.doc("delete_user")
        def delete(self, username):
            if data.users.read(username) is None:
                return Response(status=404)
            data.users.delete(username)
            return api_message(200, "unknown", username), 200


def create_app(propagation_delay: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> Flask:
    """
    In-process stand-in for https://petstore.swagger.io/v2.

    Answers with the same status codes and {"code", "type", "message"} bodies
    as the hosted service, known defects included, so the suite can run
    offline. `propagation_delay` holds every write back from readers for that
    many seconds.
    """
    if propagation_delay is None:
        propagation_delay = settings.propagation_delay

    app = Flask(__name__)
    app.config["RESTX_ERROR_404_HELP"] = False
    api = Api(app, version='1.0.7', title='Swagger Petstore',
              description='Local pet store double', prefix="/v2", doc=False)

    data = PetStoreData(propagation_delay, clock)

    namespaces_config = {
        "pet": ("Everything about your Pets", register_pet_routes),
        "store": ("Access to Petstore orders", register_store_routes),
        "user": ("Operations about user", register_user_routes),
    }

    for name, (description, register) in namespaces_config.items():
        ns = Namespace(name, description=description)
        register(ns, api, data)
        api.add_namespace(ns)

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=True, port=5001)
