from sqlalchemy import Column, Date, DateTime, Index, String, Text, UniqueConstraint, func

from .database import Base


class UserProfile(Base):
    __tablename__ = "user_profile"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    gender = Column(String, nullable=False)
    os = Column(String, nullable=False)
    birth_date = Column(Date, nullable=True)
    bio = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (Index("idx_user_profile_gender_os", "gender", "os"),)


class InterestEvent(Base):
    __tablename__ = "interest_event"

    id = Column(String, primary_key=True)
    from_user_id = Column(String, nullable=False)
    to_user_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("from_user_id", "to_user_id", name="uq_interest_pair"),
        Index("idx_interest_event_from", "from_user_id"),
        Index("idx_interest_event_to", "to_user_id"),
    )
