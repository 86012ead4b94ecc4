"""
User model and lifetime play analytics
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from database import Base


class UserRole(str, enum.Enum):
    """User role enumeration"""
    GAMER = "gamer"        # Plays campaigns and earns payouts
    BRAND = "brand"        # Creates and funds campaigns
    ADMIN = "admin"        # Runs aggregation and payout jobs


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    company_name = Column(String(200), nullable=True)

    role = Column(String(20), nullable=False, default=UserRole.GAMER.value)
    is_active = Column(Boolean, nullable=False, default=True)

    # Lifetime analytics
    puzzles_solved = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    total_earnings = Column(Float, nullable=False, default=0.0)
    total_time = Column(Integer, nullable=False, default=0)  # milliseconds
    total_moves = Column(Integer, nullable=False, default=0)
    attempts = Column(Integer, nullable=False, default=0)
    success_rate = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=True, onupdate=func.now())

    campaigns = relationship("Campaign", back_populates="brand")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

    @property
    def full_name(self) -> str:
        """Get user's full name"""
        if self.company_name and self.role == UserRole.BRAND:
            return self.company_name
        if self.first_name and self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.username or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_brand(self) -> bool:
        return self.role == UserRole.BRAND
