from datetime import datetime

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from json_post_type.constants import PostStatus
from json_post_type.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    post_type = Column(String(20), nullable=False, index=True)
    title = Column(String, nullable=False, default="")
    # Free text; expected to hold JSON but never validated by the model
    content = Column(Text, nullable=False, default="")
    status = Column(
        Enum(PostStatus, values_callable=lambda statuses: [s.value for s in statuses]),
        default=PostStatus.DRAFT,
        nullable=False,
    )
    author_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    author = relationship("User", back_populates="posts", lazy="selectin")
    revisions = relationship(
        "PostRevision",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostRevision.id.desc()",
    )

    __table_args__ = (Index("idx_posts_type_status", "post_type", "status"),)

    def __repr__(self) -> str:
        return f"<Post id={self.id} type={self.post_type} status={self.status}>"
