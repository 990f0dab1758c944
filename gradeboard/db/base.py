# import models so SQLAlchemy registers them on Base.metadata
from gradeboard.db.base_class import Base  # noqa: F401
from gradeboard.models import (  # noqa: F401
    assignment,
    evaluation,
    group,
    quiz,
    student_grade,
    submission,
    task,
    task_grade,
    user,
)
