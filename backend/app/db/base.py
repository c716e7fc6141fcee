from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# Register every model on Base.metadata before create_all() is called.
import app.models  # noqa: E402,F401
