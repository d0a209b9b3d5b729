# dental_intake/models/__init__.py
from dental_intake.db.session import Base, engine

# Import model modules so SQLAlchemy registers all mappers.
from . import lead  # noqa: F401
from . import second_opinion  # noqa: F401
from . import diagnosis_event  # noqa: F401


def init_db() -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)
