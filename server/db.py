"""
Database models and setup.
"""

import uuid
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Tuple

from fastapi import Request
from sqlalchemy import create_engine, Column, String, DateTime, ForeignKey
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker, relationship, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    """Registered account."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    conversions = relationship("Conversion", back_populates="owner")


class Conversion(Base):
    """One upload-and-convert result, owned by a single user."""
    __tablename__ = "conversions"

    id = Column(String, primary_key=True, default=_new_id)
    user_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    original_name = Column(String, nullable=False)
    image_url = Column(String, nullable=False)

    # Server-side location of the raw upload
    stored_path = Column(String, nullable=False)

    created_at = Column(DateTime, default=_utcnow, index=True, nullable=False)

    owner = relationship("User", back_populates="conversions")


class EmailAlreadyRegistered(Exception):
    """Raised when an account with the same email exists."""


class UserStore:
    """Credential records."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def create(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        """
        Persist a new account.

        Raises:
            EmailAlreadyRegistered: the email is taken, including when a
                concurrent insert wins the unique constraint
        """
        if self.get_by_email(email) is not None:
            raise EmailAlreadyRegistered(email)

        user = User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise EmailAlreadyRegistered(email) from None
        self.db.refresh(user)
        return user


class ConversionStore:
    """Conversion records, always addressed through their owner."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, original_name: str, image_url: str, stored_path: str) -> Conversion:
        conversion = Conversion(
            user_id=user_id,
            original_name=original_name,
            image_url=image_url,
            stored_path=stored_path,
        )
        self.db.add(conversion)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(conversion)
        return conversion

    def list_for_user(self, user_id: str) -> List[Conversion]:
        """All conversions owned by ``user_id``, newest first."""
        return (
            self.db.query(Conversion)
            .filter(Conversion.user_id == user_id)
            .order_by(Conversion.created_at.desc(), Conversion.id.desc())
            .all()
        )


def create_session_factory(database_url: str) -> Tuple[Engine, sessionmaker]:
    """Create the engine, make sure tables exist, and return it with a session factory."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, connect_args=connect_args)
    init_db(engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Initialize database."""
    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Iterator[Session]:
    """Get database session."""
    session_factory: Callable[[], Session] = request.app.state.session_factory
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
