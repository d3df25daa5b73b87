# erp_api/models/users.py

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.sql import func

from erp_api.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    role = Column(String, nullable=False)
    status = Column(String, nullable=False, default="ACTIVE")

    # Public identifier, e.g. user_1718000000000_k3j9x0a1b
    user_id = Column(String, unique=True, index=True, nullable=False)

    # WebAuthn challenge kept for the fingerprint login flow
    current_challenge = Column(String, nullable=True)

    password_hash = Column(String, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
