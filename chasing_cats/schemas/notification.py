"""Notification-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, Field


class PushSubscriptionKeys(BaseModel):
    """Key pair the push service uses to encrypt payloads for a device."""

    p256dh: str = Field(..., min_length=1, max_length=200)
    auth: str = Field(..., min_length=1, max_length=100)


class PushSubscriptionCreate(BaseModel):
    """Schema for registering a push subscription."""

    endpoint: str = Field(..., min_length=1, max_length=1000)
    keys: PushSubscriptionKeys


class PushSubscriptionResult(BaseModel):
    """Schema for subscribe/unsubscribe results."""

    success: bool
    message: str


class VapidPublicKeyResponse(BaseModel):
    """Schema for VAPID public key response."""

    public_key: str


class PushSendRequest(BaseModel):
    """Schema for an admin push send, to one user or to everyone."""

    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1, max_length=1000)
    icon: str | None = None
    badge: str | None = None
    tag: str | None = None
    url: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    user_id: int | None = None
    send_to_all: bool = False
    background: bool = False


class PushSendResponse(BaseModel):
    """Schema for push send results."""

    success: bool
    sent: int
    failed: int
    message: str


class PushQueuedResponse(BaseModel):
    """Schema for a send handed to the background worker."""

    queued: bool
    task_id: str


class PushStatsResponse(BaseModel):
    """Schema for push subscription statistics."""

    total_subscriptions: int
    unique_users: int
