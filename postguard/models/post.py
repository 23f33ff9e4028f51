"""
Blog models - posts, categories and tags.

Posts and tags are linked through the explicit PostTag entity. PostTag rows
belong to their post and are removed in the same flush that deletes it.
"""

from datetime import datetime
from uuid import UUID
from sqlalchemy import String, Text, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, StandardMixin


class Category(Base, StandardMixin):
    """Post category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Category {self.name}>"


class Tag(Base, StandardMixin):
    """Post tag."""

    __tablename__ = "tags"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Tag {self.name}>"


class PostTag(Base, StandardMixin):
    """Join row between a post and a tag."""

    __tablename__ = "post_tags"
    __table_args__ = (
        UniqueConstraint("post_id", "tag_id", name="uq_post_tag"),
    )

    post_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("tags.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    post: Mapped["Post"] = relationship("Post", back_populates="post_tags")
    tag: Mapped["Tag"] = relationship("Tag", lazy="selectin")


class Post(Base, StandardMixin):
    """
    Blog post.

    Owner, category, title, body and published_at are all required; the
    service layer reports their absence as a ValidationError before the
    database ever sees the row.
    """

    __tablename__ = "posts"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    published_at: Mapped[datetime] = mapped_column(nullable=False)

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category", lazy="selectin")
    post_tags: Mapped[list["PostTag"]] = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def tags(self) -> list[Tag]:
        return [post_tag.tag for post_tag in self.post_tags]

    def __repr__(self) -> str:
        return f"<Post {self.title!r}>"
