import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.friends.models import Friendship
from app.api.friends.schemas import (
    FriendEntry,
    FriendStatus,
    FriendshipStatus,
    IncomingRequestEntry,
    LegacyFriendStatus,
    RelationshipState,
)
from app.api.notifications.schemas import NotificationType, RelatedType
from app.api.notifications.service import dispatch_notification
from app.api.profile.models import User
from app.api.profile.schemas import UserShort
from app.api.profile.service import ProfileService
from app.core.exceptions import (
    AlreadyFriends,
    Conflict,
    FriendRequestNotFound,
    NotRequestRecipient,
    RequestAlreadyAccepted,
    RequestAlreadyPending,
    SelfFriendRequest,
)

logger = logging.getLogger(__name__)

PENDING = FriendshipStatus.PENDING.value
ACCEPTED = FriendshipStatus.ACCEPTED.value


class FriendshipService:
    """
    Owns every friendships row.

    Each unordered pair of users has at most one row, enforced by the
    ``unique_friendship_pair`` constraint on (user_low_id, user_high_id).
    Reads go through the pair key so they never depend on which side sent
    the request.
    """

    def __init__(self, db: Session):
        self.db = db
        self.profiles = ProfileService(db)

    # ───────────── reads ─────────────

    def find_pair(self, user_a: str, user_b: str) -> Optional[Friendship]:
        low, high = Friendship.pair_key(user_a, user_b)
        return self.db.query(Friendship).filter(
            Friendship.user_low_id == low,
            Friendship.user_high_id == high,
        ).first()

    def query_status(self, user_a: str, user_b: str) -> FriendStatus:
        friendship = self.find_pair(user_a, user_b)
        if friendship is None or user_a == user_b:
            return FriendStatus(status=RelationshipState.NONE)
        if friendship.status == ACCEPTED:
            return FriendStatus(status=RelationshipState.FRIENDS)
        if friendship.status == PENDING:
            return FriendStatus(
                status=RelationshipState.PENDING,
                requested_by=friendship.requester_id,
                request_id=friendship.id,
            )
        return FriendStatus(status=RelationshipState.NONE)

    def are_friends(self, user_a: str, user_b: str) -> bool:
        return self.query_status(user_a, user_b).status == RelationshipState.FRIENDS

    def has_pending_request(self, user_a: str, user_b: str) -> bool:
        return self.query_status(user_a, user_b).status == RelationshipState.PENDING

    def legacy_status(self, user_a: str, user_b: str) -> LegacyFriendStatus:
        return LegacyFriendStatus(
            are_friends=self.are_friends(user_a, user_b),
            has_pending_request=self.has_pending_request(user_a, user_b),
        )

    def list_friends(self, user_id: str) -> List[FriendEntry]:
        friendships = self.db.query(Friendship).filter(
            (Friendship.requester_id == user_id) | (Friendship.recipient_id == user_id),
            Friendship.status == ACCEPTED,
        ).order_by(Friendship.updated_at.desc(), Friendship.id.desc()).all()
        return [self._friend_entry(fs, user_id) for fs in friendships]

    def list_friend_ids(self, user_id: str) -> List[str]:
        return [entry.friend.id for entry in self.list_friends(user_id)]

    def list_incoming_requests(self, user_id: str) -> List[IncomingRequestEntry]:
        requests = self.db.query(Friendship).filter(
            Friendship.recipient_id == user_id, Friendship.status == PENDING
        ).order_by(Friendship.created_at.desc(), Friendship.id.desc()).all()
        return [
            IncomingRequestEntry.model_validate(
                {**self._record_fields(r), "requester": UserShort.model_validate(r.requester)}
            )
            for r in requests
        ]

    def list_sent_requests(self, user_id: str) -> List[FriendEntry]:
        requests = self.db.query(Friendship).filter(
            Friendship.requester_id == user_id, Friendship.status == PENDING
        ).order_by(Friendship.created_at.desc(), Friendship.id.desc()).all()
        return [self._friend_entry(r, user_id) for r in requests]

    # ───────────── transitions ─────────────

    async def send_request(self, requester: User, recipient_id: str) -> Friendship:
        if recipient_id == requester.id:
            raise SelfFriendRequest()
        self.profiles.get_user(recipient_id)

        existing = self.find_pair(requester.id, recipient_id)
        if existing is not None:
            self._raise_conflict(existing, requester.id)

        low, high = Friendship.pair_key(requester.id, recipient_id)
        friendship = Friendship(
            requester_id=requester.id,
            recipient_id=recipient_id,
            user_low_id=low,
            user_high_id=high,
            status=PENDING,
        )
        self.db.add(friendship)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent request for the same pair
            self.db.rollback()
            winner = self.find_pair(requester.id, recipient_id)
            if winner is None:
                raise
            self._raise_conflict(winner, requester.id)
        self.db.refresh(friendship)
        logger.info("Friend request %s: %s -> %s", friendship.id, requester.id, recipient_id)

        await dispatch_notification(
            self.db,
            user_id=recipient_id,
            type=NotificationType.FRIEND_REQUEST,
            title="New Friend Request",
            message=f"{requester.display_name} sent you a friend request",
            related_id=requester.id,
            related_type=RelatedType.USER,
        )
        return friendship

    async def accept_request(self, request_id: int, caller: User) -> Friendship:
        # Single conditional UPDATE; the row may be cancelled or accepted concurrently
        updated = self._pending_for(request_id, caller.id).update(
            {"status": ACCEPTED, "updated_at": func.now()}, synchronize_session=False
        )
        self.db.commit()
        if not updated:
            self._raise_unavailable(request_id, caller.id)
            raise FriendRequestNotFound()

        friendship = self._reload(request_id)
        if friendship is None:
            raise FriendRequestNotFound()
        logger.info("Friend request %s accepted by %s", friendship.id, caller.id)

        await dispatch_notification(
            self.db,
            user_id=friendship.requester_id,
            type=NotificationType.FRIEND_ACCEPT,
            title="Friend Request Accepted",
            message=f"{caller.display_name} accepted your friend request",
            related_id=caller.id,
            related_type=RelatedType.USER,
        )
        return friendship

    def reject_request(self, request_id: int, caller: User) -> bool:
        """Deletes a pending request addressed to the caller. Missing is a no-op."""
        deleted = self._pending_for(request_id, caller.id).delete(synchronize_session=False)
        self.db.commit()
        if not deleted:
            self._raise_unavailable(request_id, caller.id)
            return False

        logger.info("Friend request %s rejected by %s", request_id, caller.id)
        return True

    def cancel_request(self, requester_id: str, recipient_id: str) -> bool:
        """Withdraws the caller's own pending request. Missing is a no-op."""
        deleted = self.db.query(Friendship).filter(
            Friendship.requester_id == requester_id,
            Friendship.recipient_id == recipient_id,
            Friendship.status == PENDING,
        ).delete(synchronize_session=False)
        self.db.commit()
        if deleted:
            logger.info("Friend request %s -> %s cancelled", requester_id, recipient_id)
        return bool(deleted)

    def remove_friendship(self, user_a: str, user_b: str) -> bool:
        low, high = Friendship.pair_key(user_a, user_b)
        deleted = self.db.query(Friendship).filter(
            Friendship.user_low_id == low,
            Friendship.user_high_id == high,
            Friendship.status == ACCEPTED,
        ).delete(synchronize_session=False)
        self.db.commit()
        if deleted:
            logger.info("Friendship %s <-> %s removed", user_a, user_b)
        return bool(deleted)

    # ───────────── helpers ─────────────

    def _pending_for(self, request_id: int, recipient_id: str):
        return self.db.query(Friendship).filter(
            Friendship.id == request_id,
            Friendship.recipient_id == recipient_id,
            Friendship.status == PENDING,
        )

    def _reload(self, request_id: int) -> Optional[Friendship]:
        return self.db.query(Friendship).filter(
            Friendship.id == request_id
        ).populate_existing().first()

    def _raise_unavailable(self, request_id: int, caller_id: str):
        """Explains why a guarded write on ``request_id`` matched nothing. Returns if the row is gone."""
        friendship = self._reload(request_id)
        if friendship is None:
            return
        if friendship.recipient_id != caller_id:
            raise NotRequestRecipient()
        if friendship.status == ACCEPTED:
            raise RequestAlreadyAccepted()

    @staticmethod
    def _raise_conflict(existing: Friendship, requester_id: str):
        if existing.status == ACCEPTED:
            raise AlreadyFriends()
        if existing.status != PENDING:
            raise Conflict("Friend request unavailable")
        if existing.requester_id == requester_id:
            raise RequestAlreadyPending()
        raise RequestAlreadyPending("This user has already sent you a friend request")

    @staticmethod
    def _record_fields(friendship: Friendship) -> dict:
        return {
            "id": friendship.id,
            "requester_id": friendship.requester_id,
            "recipient_id": friendship.recipient_id,
            "requested_by": friendship.requested_by,
            "status": friendship.status,
            "created_at": friendship.created_at,
            "updated_at": friendship.updated_at,
        }

    def _friend_entry(self, friendship: Friendship, user_id: str) -> FriendEntry:
        return FriendEntry.model_validate(
            {**self._record_fields(friendship), "friend": UserShort.model_validate(friendship.other_party(user_id))}
        )
