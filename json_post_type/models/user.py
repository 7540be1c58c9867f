from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from json_post_type.database import Base


# Role model; capabilities map a capability name to its granted flag
class Role(Base):
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    capabilities = Column(JSON, nullable=False, default=dict)
    users = relationship("User", back_populates="role")

    def has_cap(self, capability: str) -> bool:
        return bool((self.capabilities or {}).get(capability, False))


# User model
class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, index=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    role = relationship("Role", back_populates="users", lazy="joined")

    posts = relationship("Post", back_populates="author")

    def has_cap(self, capability: str) -> bool:
        return self.role is not None and self.role.has_cap(capability)
