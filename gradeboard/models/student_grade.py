from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, func

from gradeboard.db.base_class import Base


class StudentGrade(Base):
    """Manually assigned extra points; every other grade source is computed on read."""

    __tablename__ = "student_grades"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )
    extra_points = Column(Float, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
