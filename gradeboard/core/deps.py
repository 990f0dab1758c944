from gradeboard.db.session import SessionLocal


# one session per request; a failed request never leaves a transaction open
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
