from pydantic import BaseModel, Field


class BaseGrades(BaseModel):
    quiz_points: float
    max_quiz_points: float
    assignment_points: float
    max_assignment_points: float
    extra_points: float
    max_possible_points: int


class StudentGradeRead(BaseGrades):
    user_id: int
    email: str
    full_name: str | None = None
    final_points: float
    total_points: float


class ExtraPointsUpdate(BaseModel):
    extra_points: float = Field(ge=0)


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    full_name: str | None = None
    email: str
    avatar_url: str | None = None
    base_points: float
    final_points: float
    total_points: float
