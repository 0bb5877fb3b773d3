import httpx

from api_helpers import has_status, has_status_and_field, response_body
from base_client import BaseApiClient, path_segment, payload
from models import Order


class StoreApiClient(BaseApiClient):
    """Client for the /store endpoints (orders and inventory)."""

    def place_order(self, order: Order) -> httpx.Response:
        return self._expect_ok("POST", "/store/order", json=payload(order))

    def place_order_raw(self, order: Order) -> httpx.Response:
        return self._raw("POST", "/store/order", json=payload(order))

    def get_order_by_id_raw(self, order_id: int) -> httpx.Response:
        return self._raw("GET", f"/store/order/{path_segment(order_id)}")

    def get_order_by_id(self, order_id: int, *, timeout: float = 20, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.get_order_by_id_raw(order_id),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"GET /store/order/{order_id} returns 200",
        )

    def get_order_by_id_expecting_error(self, order_id: int, status: int = 404, *,
                                        timeout: float = 10, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.get_order_by_id_raw(order_id),
            has_status(status),
            timeout=timeout,
            interval=interval,
            description=f"GET /store/order/{order_id} returns {status}",
        )

    def get_order_by_id_and_verify_pet_id(self, order_id: int, expected_pet_id: int, *,
                                          timeout: float = 20, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.get_order_by_id_raw(order_id),
            has_status_and_field(200, "petId", expected_pet_id),
            timeout=timeout,
            interval=interval,
            description=f"order {order_id} references pet {expected_pet_id}",
        )

    def delete_order_raw(self, order_id: int) -> httpx.Response:
        return self._raw("DELETE", f"/store/order/{path_segment(order_id)}")

    def delete_order(self, order_id: int, *, timeout: float = 10, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.delete_order_raw(order_id),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"DELETE /store/order/{order_id} returns 200",
        )

    def get_inventory(self) -> httpx.Response:
        return self._expect_ok("GET", "/store/inventory")

    def get_inventory_and_verify_status_count(self, status: str, expected_count: int, *,
                                              timeout: float = 10, interval: float = 1) -> httpx.Response:
        """
        Polls GET /store/inventory until the count for `status` equals `expected_count`.
        A status the service has never seen counts as 0.
        """
        def count_matches(response: httpx.Response) -> bool:
            if response.status_code != 200:
                return False
            counts = response_body(response)
            return isinstance(counts, dict) and counts.get(status, 0) == expected_count

        # Raw GET here: a non-200 inventory read is one more "not yet", not a contract failure
        return self._await(
            lambda: self._raw("GET", "/store/inventory"),
            count_matches,
            timeout=timeout,
            interval=interval,
            description=f"inventory['{status}'] == {expected_count}",
        )
