"""
Domain errors raised by the service layer.

Routers never build error responses themselves: every subclass of
``AppError`` is rendered by the handler registered in ``app.main`` as
``{"detail": message, "code": code}`` with ``status_code``.
"""
from typing import Optional


class AppError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# 404


class NotFound(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class FriendRequestNotFound(NotFound):
    code = "friend_request_not_found"
    default_message = "Friend request not found"


class UserNotFound(NotFound):
    code = "user_not_found"
    default_message = "User not found"


class NotificationNotFound(NotFound):
    code = "notification_not_found"
    default_message = "Notification not found"


# 400 conflicts


class Conflict(AppError):
    status_code = 400
    code = "conflict"
    default_message = "Conflicting request"


class AlreadyFriends(Conflict):
    code = "already_friends"
    default_message = "Already friends"


class RequestAlreadyPending(Conflict):
    code = "request_already_pending"
    default_message = "Friend request already sent"


class RequestAlreadyAccepted(Conflict):
    code = "request_already_accepted"
    default_message = "Friend request already accepted"


# 403


class Unauthorized(AppError):
    status_code = 403
    code = "unauthorized"
    default_message = "Not allowed"


class NotRequestRecipient(Unauthorized):
    code = "not_request_recipient"
    default_message = "Only the recipient can respond to this friend request"


# 400 validation


class InvalidRequest(AppError):
    status_code = 400
    code = "invalid_request"
    default_message = "Invalid request"


class SelfFriendRequest(InvalidRequest):
    code = "self_friend_request"
    default_message = "You cannot send a friend request to yourself"
