from typing import Iterator

from sqlalchemy.orm import Session

from db import SessionLocal


def get_db() -> Iterator[Session]:
    """One SQLAlchemy session per request, closed when the response is sent."""
    with SessionLocal() as db:
        yield db
