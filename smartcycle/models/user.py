"""
User
---------------------------
"""
from enum import Enum

from tortoise import Model, fields


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Model):
    """
    Represents a User in the system.

    The ``auth_id`` is the subject that the token verifier resolves
    a bearer token to, and is how a request is matched to a user.
    """

    id = fields.IntField(primary_key=True)
    auth_id = fields.CharField(max_length=255, unique=True)

    name = fields.CharField(max_length=255)
    email = fields.CharField(max_length=255, unique=True)
    phone = fields.CharField(max_length=10, null=True)

    role = fields.CharEnumField(UserRole, default=UserRole.USER)
    is_active = fields.BooleanField(default=True)

    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def serialize(self):
        return {
            "id": self.id,
            "auth_id": self.auth_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "is_active": self.is_active,
            "created_at": self.created_at,
        }

    def summary(self):
        return {"id": self.id, "name": self.name, "email": self.email}

    def __str__(self):
        return f"[{self.id}] {self.name} ({self.email})"
