from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from gradeboard.db.base_class import Base


class FinalGroup(Base):
    __tablename__ = "final_groups"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    members = relationship(
        "GroupMember", back_populates="group", cascade="all, delete-orphan"
    )
    tasks = relationship(
        "Task", back_populates="group", cascade="all, delete-orphan"
    )
    evaluations = relationship(
        "FinalEvaluation", back_populates="group", cascade="all, delete-orphan"
    )


class GroupMember(Base):
    __tablename__ = "final_group_members"

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(
        Integer,
        ForeignKey("final_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # "owner" | "member"
    role = Column(String(20), nullable=False, default="member")
    joined_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_final_group_members_group_user"),
    )

    group = relationship("FinalGroup", back_populates="members")
    user = relationship("User", back_populates="group_memberships")
