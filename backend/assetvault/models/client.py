"""
Client and user models
"""

from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import validates
import re

from assetvault.models.base import BaseModel


class Client(BaseModel):
    """
    Client: the scope under which assets and showrooms live
    """
    __tablename__ = "clients"

    name = Column(
        String(255),
        nullable=False,
        comment="Display name of the client"
    )

    tenant_id = Column(
        String(100),
        nullable=False,
        index=True,
        comment="Tenant the client belongs to"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        comment="Whether the client is active"
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name={self.name}, tenant={self.tenant_id})>"


class User(BaseModel):
    """
    Tenant user; receives expiration emails while active
    """
    __tablename__ = "users"

    email = Column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
        comment="Login and notification address"
    )

    name = Column(
        String(255),
        nullable=False,
        comment="Display name"
    )

    tenant_id = Column(
        String(100),
        nullable=False,
        index=True,
        comment="Tenant the user belongs to"
    )

    client_id = Column(
        String(36),
        nullable=True,
        index=True,
        comment="Client scope of the user, if any"
    )

    role_name = Column(
        String(50),
        nullable=False,
        default="CLIENT",
        comment="Role name used for authorization checks"
    )

    is_active = Column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        comment="Inactive users receive no email"
    )

    @validates('email')
    def validate_email(self, key: str, email: str) -> str:
        """
        Validate email format
        """
        if not email:
            raise ValueError("Email cannot be empty")

        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, email.strip()):
            raise ValueError("Invalid email format")

        return email.strip().lower()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
