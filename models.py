from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Category:
    id: Optional[int] = None
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"id": self.id, "name": self.name})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        return cls(id=data.get("id"), name=data.get("name"))


@dataclass
class Tag:
    id: Optional[int] = None
    name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({"id": self.id, "name": self.name})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tag":
        return cls(id=data.get("id"), name=data.get("name"))


@dataclass
class Pet:
    id: Optional[int] = None
    name: Optional[str] = None
    category: Optional[Category] = None
    photo_urls: Optional[List[str]] = None
    tags: List[Tag] = field(default_factory=list)
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "name": self.name,
            "category": self.category.to_dict() if self.category else None,
            "photoUrls": list(self.photo_urls) if self.photo_urls is not None else None,
            "tags": [t.to_dict() for t in self.tags],
            "status": self.status,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        category = data.get("category")
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            category=Category.from_dict(category) if isinstance(category, dict) else None,
            photo_urls=data.get("photoUrls"),
            tags=[Tag.from_dict(t) for t in data.get("tags") or []],
            status=data.get("status"),
        )


@dataclass
class User:
    id: Optional[int] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    phone: Optional[str] = None
    user_status: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "password": self.password,
            "phone": self.phone,
            "userStatus": self.user_status,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data.get("id"),
            username=data.get("username"),
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            email=data.get("email"),
            password=data.get("password"),
            phone=data.get("phone"),
            user_status=data.get("userStatus"),
        )


@dataclass
class Order:
    id: Optional[int] = None
    pet_id: Optional[int] = None
    quantity: Optional[int] = None
    ship_date: Optional[str] = None  # e.g. 2024-05-01T10:00:00.000+0000
    status: Optional[str] = None
    complete: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none({
            "id": self.id,
            "petId": self.pet_id,
            "quantity": self.quantity,
            "shipDate": self.ship_date,
            "status": self.status,
            "complete": self.complete,
        })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Order":
        return cls(
            id=data.get("id"),
            pet_id=data.get("petId"),
            quantity=data.get("quantity"),
            ship_date=data.get("shipDate"),
            status=data.get("status"),
            complete=data.get("complete"),
        )


@dataclass(frozen=True)
class ApiResponse:
    """Acknowledgement / error envelope: {"code": ..., "type": ..., "message": ...}"""
    code: Optional[int] = None
    type: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiResponse":
        return cls(code=data.get("code"), type=data.get("type"), message=data.get("message"))


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    # The service treats a missing field and a null one differently
    return {k: v for k, v in data.items() if v is not None}
