"""Booking chat: history, sending and a live feed over WebSocket."""
import asyncio
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel
from starlette.websockets import WebSocketState

from notifications import Notice
from routers.common import raise_for_default
from studio import StudioData, get_studio, new_record

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings/{booking_id}/messages", tags=["messages"])


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    message: str


class MessageResponse(BaseModel):
    """Schema for a chat message."""

    id: str
    booking_id: str
    sender_id: Optional[str]
    message: str
    created_at: datetime


class SendResult(BaseModel):
    sent: bool


@router.get("/", response_model=list[MessageResponse])
async def list_messages(booking_id: str, studio: StudioData = Depends(get_studio)):
    """Messages for a booking, oldest first."""
    await studio.fetch_messages(booking_id)
    if studio.notices.latest or not studio.is_supabase_available:
        raise_for_default(studio, "Failed to load messages")
    return studio.messages


@router.post("/", response_model=SendResult)
async def send_message(
    booking_id: str, body: MessageCreate, studio: StudioData = Depends(get_studio)
):
    """Send a message as the signed-in user."""
    if not body.message.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message cannot be empty",
        )
    await studio.send_message(booking_id, body.message)
    if studio.notices.latest or not studio.is_supabase_available:
        raise_for_default(studio, "Failed to send message")
    return SendResult(sent=True)


@router.websocket("/ws")
async def message_feed(websocket: WebSocket, booking_id: str, studio: StudioData = Depends(get_studio)):
    """Push each new message on the booking to the socket until it closes.

    A subscription error reported by the channel closes the socket with
    1011 and the error text as the reason.
    """
    if not studio.is_supabase_available:
        await websocket.accept()
        await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason="Supabase is not configured")
        return

    queue: asyncio.Queue = asyncio.Queue()
    studio.notices.listeners.append(queue.put_nowait)
    channel = await studio.subscribe_to_messages(
        booking_id, lambda payload: queue.put_nowait(new_record(payload))
    )
    await websocket.accept()

    async def forward() -> None:
        while True:
            item = await queue.get()
            if isinstance(item, Notice):
                await websocket.close(code=status.WS_1011_INTERNAL_ERROR, reason=item.description)
                return
            await websocket.send_json(item)

    async def receive() -> None:
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Message feed for booking %s closed", booking_id)

    forwarder = asyncio.create_task(forward())
    receiver = asyncio.create_task(receive())
    try:
        done, _ = await asyncio.wait({forwarder, receiver}, return_when=asyncio.FIRST_COMPLETED)
        if forwarder in done and forwarder.exception() is not None:
            logger.error(
                "Message feed for booking %s failed: %r", booking_id, forwarder.exception()
            )
            if websocket.client_state == WebSocketState.CONNECTED:
                await websocket.close(
                    code=status.WS_1011_INTERNAL_ERROR, reason="Message feed failed"
                )
    finally:
        forwarder.cancel()
        receiver.cancel()
        await studio.unsubscribe(channel)
