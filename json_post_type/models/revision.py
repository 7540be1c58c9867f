from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from json_post_type.database import Base


class PostRevision(Base):
    __tablename__ = "post_revisions"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    editor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    post = relationship("Post", back_populates="revisions")
    editor = relationship("User", foreign_keys=[editor_id], lazy="selectin")
