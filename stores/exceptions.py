"""
Shared exception definitions for the in-memory stores and the relay.

Hierarchy:
- StoreError (base for all store exceptions)
  - RoomStoreError (room-specific errors)
  - RelayError (per-message rejections raised by the relay)

`retryable` tells the client whether sending the same request again
could reasonably succeed later.
"""


# =========================
# Base exception
# =========================

class StoreError(Exception):
    """Base exception for all store-related errors."""
    retryable: bool = True


# =========================
# RoomStore exceptions
# =========================

class RoomStoreError(StoreError):
    """Base exception for room store errors."""
    retryable = True


class RoomNotFound(RoomStoreError):
    retryable = False


class RoomFull(RoomStoreError):
    retryable = True
    # someone may leave


class RoomAlreadyExists(RoomStoreError):
    retryable = False


class InvalidRoomState(RoomStoreError):
    retryable = False


# =========================
# Relay exceptions
# =========================

class RelayError(StoreError):
    """Base exception for rejected inbound messages."""
    retryable = False


class RateLimited(RelayError):
    retryable = True


class MalformedMessage(RelayError):
    retryable = False
