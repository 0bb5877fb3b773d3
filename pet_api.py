from typing import Any, Dict

import httpx

from api_helpers import body_field, has_status
from base_client import BaseApiClient, path_segment, payload
from models import Pet


class PetApiClient(BaseApiClient):
    """Client for the /pet endpoints."""

    def add_pet(self, pet: Pet) -> httpx.Response:
        return self._expect_ok("POST", "/pet", json=payload(pet))

    def add_pet_raw(self, pet: Pet) -> httpx.Response:
        return self._raw("POST", "/pet", json=payload(pet))

    def get_pet_by_id_raw(self, pet_id: int) -> httpx.Response:
        return self._raw("GET", f"/pet/{path_segment(pet_id)}")

    def get_pet_by_id(self, pet_id: int, *, timeout: float = 20, interval: float = 1) -> httpx.Response:
        """Polls GET /pet/{id} until the freshly written pet is readable (200)."""
        return self._await(
            lambda: self.get_pet_by_id_raw(pet_id),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"GET /pet/{pet_id} returns 200",
        )

    def get_pet_by_id_expecting_error(self, pet_id: int, status: int = 404, *,
                                      timeout: float = 10, interval: float = 1) -> httpx.Response:
        """Polls GET /pet/{id} until it reports `status`; used to confirm a deletion has landed."""
        return self._await(
            lambda: self.get_pet_by_id_raw(pet_id),
            has_status(status),
            timeout=timeout,
            interval=interval,
            description=f"GET /pet/{pet_id} returns {status}",
        )

    def wait_for_pet_update(self, pet_id: int, expected_fields: Dict[str, Any], *,
                            timeout: float = 10, interval: float = 0.1) -> httpx.Response:
        """
        Polls GET /pet/{id} until every dotted path in `expected_fields`
        (e.g. {"name": "Rex", "category.name": "Dogs"}) holds its value.
        """
        def reflects_update(response: httpx.Response) -> bool:
            return response.status_code == 200 and all(
                body_field(response, path) == value for path, value in expected_fields.items()
            )

        return self._await(
            lambda: self.get_pet_by_id_raw(pet_id),
            reflects_update,
            timeout=timeout,
            interval=interval,
            description=f"GET /pet/{pet_id} reflects {expected_fields}",
        )

    def update_pet_raw(self, pet: Pet) -> httpx.Response:
        return self._raw("PUT", "/pet", json=payload(pet))

    def update_pet(self, pet: Pet, *, timeout: float = 10, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.update_pet_raw(pet),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"PUT /pet for id {pet.id} returns 200",
        )

    def delete_pet_raw(self, pet_id: int) -> httpx.Response:
        return self._raw("DELETE", f"/pet/{path_segment(pet_id)}")

    def delete_pet(self, pet_id: int, *, timeout: float = 10, interval: float = 1) -> httpx.Response:
        # A DELETE right after the create can 404 until the pet has propagated
        return self._await(
            lambda: self.delete_pet_raw(pet_id),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"DELETE /pet/{pet_id} returns 200",
        )

    def find_pets_by_status(self, status: str) -> httpx.Response:
        return self._expect_ok("GET", "/pet/findByStatus", params={"status": status})
