from gradeboard.db.base import Base
from gradeboard.db.session import engine


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
