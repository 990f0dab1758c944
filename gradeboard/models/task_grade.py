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


class TaskGrade(Base):
    __tablename__ = "final_task_grades"

    id = Column(Integer, primary_key=True, index=True)

    task_id = Column(
        Integer,
        ForeignKey("final_tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    student_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    grader_id = Column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    points = Column(Float, nullable=False)
    max_points = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)

    graded_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("task_id", "student_id", name="uq_final_task_grades_task_student"),
    )

    task = relationship("Task", back_populates="grades")
    student = relationship("User", foreign_keys=[student_id])
    grader = relationship("User", foreign_keys=[grader_id])
