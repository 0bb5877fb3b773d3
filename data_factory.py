import random
import uuid
from datetime import datetime, timezone

from models import Category, Order, Pet, Tag, User

DEFAULT_PHOTO_URLS = ["http://example.com/photo1.jpg", "http://example.com/photo2.jpg"]


def _suffix() -> str:
    return uuid.uuid4().hex[:8]


def unique_pet_id() -> int:
    return random.randint(1_000_000, 99_999_999)


def ship_date_now() -> str:
    """UTC timestamp in the service's format: millisecond precision, +0000 offset."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}+0000"


def random_pet(status: str = "available") -> Pet:
    return Pet(
        id=unique_pet_id(),
        name=f"TestPet_{_suffix()}",
        category=Category(id=1, name="Dogs"),
        photo_urls=list(DEFAULT_PHOTO_URLS),
        tags=[Tag(id=10, name="Friendly"), Tag(id=11, name="Cute")],
        status=status,
    )


def random_user() -> User:
    suffix = _suffix()
    return User(
        id=random.randint(1_000_000, 1_000_999_999),
        username=f"testuser_{suffix}",
        first_name="John",
        last_name="Doe",
        email=f"email_{suffix}@test.com",
        password="password123",
        phone="123-456-7890",
        user_status=1,
    )


def random_order(pet_id: int) -> Order:
    return Order(
        id=random.randint(1, 999),
        pet_id=pet_id,
        quantity=1,
        ship_date=ship_date_now(),
        status="placed",
        complete=False,
    )
