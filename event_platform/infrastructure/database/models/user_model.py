"""
SQLAlchemy models for the User aggregate.
"""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, LargeBinary, String, Table, false
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import relationship

from .base import Base, BaseModel
from ....domain.entities.user import Role, User


user_roles = Table(
    'user_roles',
    Base.metadata,
    Column('user_id', PGUUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('role_id', PGUUID(as_uuid=True), ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True),
)


class RoleModel(BaseModel):
    """SQLAlchemy model for roles table."""

    __tablename__ = 'roles'

    name = Column(String(100), unique=True, nullable=False)

    def to_domain(self) -> Role:
        """Convert ORM model to domain entity."""
        return Role(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserModel(BaseModel):
    """SQLAlchemy model for users table."""

    __tablename__ = 'users'

    # Authentication
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    salt = Column(LargeBinary(16), nullable=False)
    password_scheme = Column(String(50), nullable=True)
    refresh_token = Column(String(255), nullable=True, index=True)

    # Login tracking
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    # Soft delete
    is_deleted = Column(Boolean, nullable=False, default=False, server_default=false())

    # Relationships
    roles = relationship(
        'RoleModel',
        secondary=user_roles,
        lazy='selectin',
    )

    def to_domain(self) -> User:
        """Convert ORM model to domain entity."""
        return User(
            id=self.id,
            username=self.username,
            password_hash=self.password_hash,
            salt=bytes(self.salt),
            password_scheme=self.password_scheme,
            refresh_token=self.refresh_token,
            roles=[role.to_domain() for role in self.roles],
            last_login_at=self.last_login_at,
            is_deleted=bool(self.is_deleted),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, user: User) -> 'UserModel':
        """
        Create ORM model from domain entity.

        Roles are attached by the repository, which resolves them against
        existing rows.
        """
        return cls(
            id=user.id,
            username=user.username,
            password_hash=user.password_hash,
            salt=user.salt,
            password_scheme=user.password_scheme,
            refresh_token=user.refresh_token,
            last_login_at=user.last_login_at,
            is_deleted=user.is_deleted,
            created_at=user.created_at,
            updated_at=user.updated_at,
            roles=[],
        )

    def update_from_domain(self, user: User) -> None:
        """Update ORM model from domain entity."""
        self.username = user.username
        self.password_hash = user.password_hash
        self.salt = user.salt
        self.password_scheme = user.password_scheme
        self.refresh_token = user.refresh_token
        self.last_login_at = user.last_login_at
        self.is_deleted = user.is_deleted
        self.updated_at = user.updated_at
