from typing import Any, Callable, Dict, Optional

import httpx
import jsonschema
from hamcrest.core.matcher import Matcher
from hamcrest.core.string_description import StringDescription
from jsonschema.exceptions import ValidationError

from logging_helper import log_request, log_response
from settings import settings


class ContractViolation(AssertionError):
    """
    The service answered, but not the way the caller said it must.

    Raised on non-retrying calls only; keeps expected vs actual status and,
    for body checks, the expected vs actual fragment.
    """

    def __init__(
        self,
        message: str,
        *,
        expected_status: Optional[int] = None,
        actual_status: Optional[int] = None,
        expected_body: Any = None,
        actual_body: Any = None,
    ):
        self.expected_status = expected_status
        self.actual_status = actual_status
        self.expected_body = expected_body
        self.actual_body = actual_body
        super().__init__(message)


def build_http_client(request_spec, *, timeout: Optional[float] = None,
                      transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    """
    Creates the httpx.Client every resource client sends through.

    Base address and Content-Type/Accept headers come from the request spec;
    every exchange is logged in both directions via event hooks.
    """
    return httpx.Client(
        base_url=request_spec.base_url,
        headers=request_spec.headers(),
        timeout=timeout if timeout is not None else settings.http_timeout,
        transport=transport,
        event_hooks={"request": [log_request], "response": [log_response]},
    )


def make_request(client: httpx.Client, method, url, params=None, json=None) -> httpx.Response:
    # Exactly one exchange. Do NOT raise on status here, callers decide what is expected.
    # Transport errors (httpx.TransportError) are left to propagate.
    return client.request(method, url, params=params, json=json)


def response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def expect_status(response: httpx.Response, expected_status: int) -> httpx.Response:
    if response.status_code != expected_status:
        raise ContractViolation(
            f"Expected status {expected_status}, got {response.status_code} "
            f"for {response.request.method} {response.request.url}. Body: {response.text[:1000]}",
            expected_status=expected_status,
            actual_status=response.status_code,
            actual_body=response_body(response),
        )
    return response


def expect_content_type(response: httpx.Response, content_type: str) -> httpx.Response:
    # Servers may append "; charset=utf-8"
    actual = response.headers.get("Content-Type", "")
    if content_type.lower() not in actual.lower():
        raise ContractViolation(
            f"Expected Content-Type {content_type}, got '{actual}' "
            f"for {response.request.method} {response.request.url}",
            expected_status=response.status_code,
            actual_status=response.status_code,
            expected_body=content_type,
            actual_body=actual,
        )
    return response


def body_field(source: Any, path: str) -> Any:
    """
    Resolves a dotted path such as "category.name" or "tags.id" inside a JSON body.

    Lists are mapped over, so "tags.id" gives the list of every tag's id.
    Missing keys resolve to None.
    """
    value = response_body(source) if isinstance(source, httpx.Response) else source
    for part in path.split("."):
        if isinstance(value, list):
            value = [item.get(part) if isinstance(item, dict) else None for item in value]
        elif isinstance(value, dict):
            value = value.get(part)
        else:
            return None
    return value


def expect_body(response: httpx.Response, path: str, matcher: Matcher) -> httpx.Response:
    actual = body_field(response, path)
    if not matcher.matches(actual):
        expected = StringDescription()
        matcher.describe_to(expected)
        mismatch = StringDescription()
        matcher.describe_mismatch(actual, mismatch)
        raise ContractViolation(
            f"Body field '{path}' of {response.request.method} {response.request.url}: "
            f"expected {expected}, but {mismatch}",
            expected_status=response.status_code,
            actual_status=response.status_code,
            expected_body=str(expected),
            actual_body=actual,
        )
    return response


def validate_schema(response: httpx.Response, schema: Dict[str, Any], label: str = "response") -> Any:
    data = response_body(response)
    try:
        jsonschema.validate(instance=data, schema=schema)
    except ValidationError as e:
        raise ContractViolation(
            f"Response JSON does not match '{label}' schema:\n"
            f"Endpoint: {response.request.method} {response.request.url}\n"
            f"Validation message: {e.message}\n"
            f"Instance path: {list(e.path)}\n"
            f"Offending instance: {e.instance}",
            expected_status=response.status_code,
            actual_status=response.status_code,
            expected_body=label,
            actual_body=data,
        ) from e
    return data


def has_status(expected_status: int) -> Callable[[httpx.Response], bool]:
    def predicate(response: httpx.Response) -> bool:
        return response.status_code == expected_status
    return predicate


def has_status_and_field(expected_status: int, path: str, expected_value: Any) -> Callable[[httpx.Response], bool]:
    def predicate(response: httpx.Response) -> bool:
        return response.status_code == expected_status and body_field(response, path) == expected_value
    return predicate
