from typing import Optional, Sequence

import httpx
from hamcrest import equal_to, starts_with

from api_helpers import expect_body, expect_status, has_status, has_status_and_field
from base_client import BaseApiClient, path_segment, payload
from models import User

LOGIN_MESSAGE_PREFIX = "logged in user session:"


class UserApiClient(BaseApiClient):
    """Client for the /user endpoints."""

    def create_user(self, user: User) -> httpx.Response:
        return self._expect_ok("POST", "/user", json=payload(user))

    def create_user_raw(self, user: User) -> httpx.Response:
        # No status assertion; negative-path tests check the status themselves
        return self._raw("POST", "/user", json=payload(user))

    def get_user_by_username_raw(self, username: str) -> httpx.Response:
        return self._raw("GET", f"/user/{path_segment(username)}")

    def get_user_by_username(self, username: str, *, timeout: float = 20, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.get_user_by_username_raw(username),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"user '{username}' is readable",
        )

    def get_user_by_username_expecting_error(self, username: str, status: int = 404, *,
                                             timeout: float = 20, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.get_user_by_username_raw(username),
            has_status(status),
            timeout=timeout,
            interval=interval,
            description=f"GET /user/{username} returns {status}",
        )

    def update_user_raw(self, user: User) -> httpx.Response:
        return self._raw("PUT", f"/user/{path_segment(user.username)}", json=payload(user))

    def update_user(self, user: User, *, timeout: float = 10, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.update_user_raw(user),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"PUT /user/{user.username} returns 200",
        )

    def wait_for_user_update(self, username: str, expected_first_name: str, timeout: float = 10,
                             interval: float = 0.1) -> httpx.Response:
        """Polls GET /user/{username} until firstName shows the updated value."""
        return self._await(
            lambda: self.get_user_by_username_raw(username),
            has_status_and_field(200, "firstName", expected_first_name),
            timeout=timeout,
            interval=interval,
            description=f"user '{username}' has firstName '{expected_first_name}'",
        )

    def delete_user_raw(self, username: str) -> httpx.Response:
        return self._raw("DELETE", f"/user/{path_segment(username)}")

    def delete_user(self, username: str, *, timeout: float = 10, interval: float = 1) -> httpx.Response:
        return self._await(
            lambda: self.delete_user_raw(username),
            has_status(200),
            timeout=timeout,
            interval=interval,
            description=f"DELETE /user/{username} returns 200",
        )

    def login_user(self, username: str, password: str) -> httpx.Response:
        response = self._expect_ok("GET", "/user/login", params={"username": username, "password": password})
        return expect_body(response, "message", starts_with(LOGIN_MESSAGE_PREFIX))

    def login_user_expecting_error(self, username: Optional[str], password: Optional[str],
                                   expected_status: int) -> httpx.Response:
        # None means "leave the parameter out entirely"
        params = {k: v for k, v in (("username", username), ("password", password)) if v is not None}
        return expect_status(self._raw("GET", "/user/login", params=params), expected_status)

    def logout_user(self) -> httpx.Response:
        return expect_body(self._expect_ok("GET", "/user/logout"), "message", equal_to("ok"))

    def create_users_with_list(self, users: Sequence[User]) -> httpx.Response:
        return self._expect_ok("POST", "/user/createWithList", json=payload(list(users)))

    def create_users_with_array(self, users: Sequence[User]) -> httpx.Response:
        return self._expect_ok("POST", "/user/createWithArray", json=payload(list(users)))
