import logging

import httpx

from settings import settings

RED = "\033[91m"
YELLOW = "\033[93m"
GREEN = "\033[92m"
RESET = "\033[0m"
WHITE = "\033[97m"

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s.%(msecs)03d - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger("petstore")

# Bodies longer than this are cut in the exchange log
MAX_BODY_LOG = 1000


def log_status(status, message, extra=""):
    status = status.lower()
    color = WHITE  # default

    if status == "error":
        color = RED
    elif status == "warning":
        color = YELLOW
    elif status == "good":
        color = GREEN

    if not extra:
        logger.info(f"{color}{message}{RESET}")
    else:
        logger.info(f"{color}{message}{extra}{RESET}")


def _clip(text: str) -> str:
    if len(text) <= MAX_BODY_LOG:
        return text
    return text[:MAX_BODY_LOG] + "..."


def log_request(request: httpx.Request):
    body = request.content.decode("utf-8", errors="replace") if request.content else ""
    log_status("info", f">>> {request.method} {request.url}", f" {_clip(body)}" if body else "")


def log_response(response: httpx.Response):
    # Event hooks see the response before the body is read
    response.read()
    request = response.request
    status = "good" if response.status_code < 400 else "warning"
    log_status(
        status,
        f"<<< {response.status_code} {request.method} {request.url}",
        f" {_clip(response.text)}" if response.text else "",
    )
