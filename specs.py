from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from api_helpers import expect_content_type, expect_status
from settings import settings

JSON = "application/json"


@dataclass(frozen=True)
class RequestSpec:
    base_url: str
    content_type: str = JSON
    accept: str = JSON

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": self.content_type, "Accept": self.accept}


@dataclass(frozen=True)
class ResponseSpec:
    status_code: int = 200
    content_type: str = JSON

    def verify(self, response: httpx.Response) -> httpx.Response:
        expect_status(response, self.status_code)
        return expect_content_type(response, self.content_type)


@dataclass(frozen=True)
class ApiSpecifications:
    request: RequestSpec
    response_200: ResponseSpec


def init_specs(base_url: Optional[str] = None) -> ApiSpecifications:
    """Builds the request profile and the default 200/JSON expectation. Safe to call repeatedly."""
    return ApiSpecifications(
        request=RequestSpec(base_url=(base_url or settings.base_url).rstrip("/")),
        response_200=ResponseSpec(),
    )
