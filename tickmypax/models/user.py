import uuid
import enum

from sqlalchemy import Column, String, DateTime, Boolean

from ..database import Base, utcnow


class UserRole(str, enum.Enum):
    ADMIN = "Admin"
    GUIDE = "Guide"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(320), unique=True, index=True, nullable=False)
    user_name = Column(String(256), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(30), default=UserRole.GUIDE.value, index=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    last_login = Column(DateTime, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def display_name(self) -> str:
        """Name recorded as check-in attributor"""
        return self.user_name or self.email

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
