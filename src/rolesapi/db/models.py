from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from . import Base


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = (Index("ix_roles_name", "name", unique=True),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)

    # Users holding a role are looked up through users.role_id, never stored here.


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        Index("ix_users_email", "email", unique=True),
        Index("ix_users_role_id", "role_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)
    role_id = Column(
        Integer, ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False
    )

    # One-directional; only populated when a query asks for it with joinedload.
    role = relationship(Role, lazy="select")
