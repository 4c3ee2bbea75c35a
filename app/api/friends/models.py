from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database.database import Base


class Friendship(Base):
    __tablename__ = "friendships"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(String, ForeignKey("users.id"), nullable=False)
    recipient_id = Column(String, ForeignKey("users.id"), nullable=False)
    # Unordered pair key: both parties sorted, one row per pair
    user_low_id = Column(String, nullable=False)
    user_high_id = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")  # pending, accepted, blocked
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    requester = relationship("User", foreign_keys=[requester_id], backref="sent_friend_requests")
    recipient = relationship("User", foreign_keys=[recipient_id], backref="received_friend_requests")

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="unique_friendship_pair"),
        CheckConstraint("requester_id <> recipient_id", name="ck_friendship_not_self"),
        Index("ix_friendships_requester_status", "requester_id", "status"),
        Index("ix_friendships_recipient_status", "recipient_id", "status"),
    )

    @property
    def requested_by(self) -> str:
        return self.requester_id

    @staticmethod
    def pair_key(user_a: str, user_b: str):
        return (user_a, user_b) if user_a <= user_b else (user_b, user_a)

    def other_party(self, user_id: str):
        return self.recipient if self.requester_id == user_id else self.requester
