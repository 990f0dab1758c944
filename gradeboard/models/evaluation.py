from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from gradeboard.db.base_class import Base


class FinalEvaluation(Base):
    """Cached per-(group, student) total of final-project task points.

    Only written by an explicit recalculation; it can be stale until then.
    """

    __tablename__ = "final_evaluations"

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
    evaluator_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    total_points = Column(Float, nullable=False, default=0)
    overall_feedback = Column(Text, nullable=True)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_final_evaluations_group_user"),
    )

    group = relationship("FinalGroup", back_populates="evaluations")
    student = relationship("User", foreign_keys=[user_id])
    evaluator = relationship("User", foreign_keys=[evaluator_id])
