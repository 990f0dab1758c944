from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gradeboard.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False
    )
    full_name: Mapped[str | None] = mapped_column(String(255))
    avatar_url: Mapped[str | None] = mapped_column(String(512))
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    # "student" | "lecturer" | "admin"
    role: Mapped[str] = mapped_column(String(50), nullable=False, default="student")

    group_memberships = relationship(
        "GroupMember", back_populates="user", cascade="all, delete-orphan"
    )

    submissions = relationship(
        "Submission", back_populates="student", cascade="all, delete-orphan"
    )

    quiz_results = relationship(
        "QuizResult", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown"
