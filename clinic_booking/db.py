# clinic_booking/db.py

from sqlmodel import SQLModel, create_engine, Session

from clinic_booking.config import DATABASE_URL, SQL_ECHO

# Engine = connection to the database
engine = create_engine(
    DATABASE_URL,
    echo=SQL_ECHO,
    connect_args={"check_same_thread": False},  # required for SQLite + FastAPI
)


def init_db(bind=None):
    # models must be imported so their tables are registered on the metadata
    from clinic_booking import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session
