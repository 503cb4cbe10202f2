from sqlalchemy import Column, DateTime, ForeignKey, Integer, LargeBinary, String, UniqueConstraint

from stepauth.auth.roles import Role
from stepauth.core.clock import utcnow
from stepauth.database.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    # Both are nulled when the user is deleted
    username = Column(String(250), unique=True, index=True, nullable=True)
    email = Column(String(320), unique=True, index=True, nullable=True)
    display_name = Column(String(250), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    deleted_at = Column(DateTime, nullable=True)
    banned_at = Column(DateTime, nullable=True)
    role = Column(Integer, nullable=False, default=Role.UNVERIFIED.id)
    proof_of_work = Column(String, nullable=True)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    # Raw digest of the configured hash algorithm
    password = Column(LargeBinary(255), nullable=False)
    otp_secret = Column(String(255), nullable=True)
    # Comma separated, 50 codes of 16 chars fit in 850
    recovery_codes = Column(String(850), nullable=False, default="")


class UserSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (UniqueConstraint("user_id", "token", name="uq_sessions_user_token"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    token = Column(String(255), nullable=False)
    created = Column(DateTime, nullable=False, default=utcnow)
    expires = Column(DateTime, nullable=False, index=True)
    last_used = Column(DateTime, nullable=False, default=utcnow)
