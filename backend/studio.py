"""Data access for the studio website: bookings, uploads, catalog and chat.

Every operation checks that Supabase is configured first. When it is not,
the operation logs a warning and returns its default (False, None or
nothing) without touching the network. Failures from Supabase are either
reported to the visitor through the notice board, re-raised, or both,
depending on whether the caller is expected to react.
"""
import logging
from typing import Any, Callable, Mapping, Optional
from uuid import uuid4

from realtime import RealtimeSubscribeStates
from supabase import AsyncClient

from database import REFERENCE_PHOTOS_BUCKET, get_supabase
from notifications import NoticeBoard, report_error

logger = logging.getLogger(__name__)

REQUIRED_BOOKING_FIELDS = ("first_name", "last_name", "email", "phone", "is_custom")

FLASH_BOOKING_STATUS = "pending"


class MissingFieldError(ValueError):
    """A booking was submitted without one of the required fields."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class BookingNotCreatedError(RuntimeError):
    """Supabase accepted the insert but returned no booking row."""


def new_record(payload: Mapping[str, Any]) -> dict:
    """Inserted row carried by a realtime postgres_changes payload."""
    if "new" in payload:
        return dict(payload["new"])
    data = payload.get("data") or {}
    return dict(data.get("record") or {})


class StudioData:
    """Supabase-backed operations plus the message state of the active view."""

    def __init__(self, client: Optional[AsyncClient], notices: Optional[NoticeBoard] = None):
        self.client = client
        self.notices = notices if notices is not None else NoticeBoard()
        self.messages: list[dict] = []
        self.is_fetching_messages = False
        self.is_sending_message = False

    @property
    def is_supabase_available(self) -> bool:
        return self.client is not None

    def handle_error(self, error: BaseException) -> None:
        report_error(self.notices, error)

    async def create_booking(self, booking: Mapping[str, Any]) -> bool:
        """Insert a booking. Returns False when Supabase is not configured.

        Raises MissingFieldError before any request when a required field is
        absent; Supabase errors are logged and re-raised.
        """
        if not self.is_supabase_available:
            logger.warning("Supabase not available, booking creation skipped")
            return False

        try:
            logger.info("Attempting to create booking with data: %s", booking)
            for field in REQUIRED_BOOKING_FIELDS:
                if field not in booking:
                    logger.error("Missing required field: %s", field)
                    raise MissingFieldError(field)

            response = await self.client.table("bookings").insert(dict(booking)).execute()
            if not response.data:
                raise BookingNotCreatedError("Booking insert returned no row")
            logger.info("Booking created successfully: %s", response.data[0].get("id"))
            return True
        except Exception as e:
            logger.error("Error creating booking: %r", e)
            raise

    async def upload_image(
        self,
        filename: str,
        content: bytes,
        path: str,
        content_type: Optional[str] = None,
    ) -> Optional[str]:
        """Upload a reference photo under path/ and return its public URL."""
        if not self.is_supabase_available:
            logger.warning("Supabase not available, image upload skipped")
            return None

        try:
            file_ext = filename.split(".")[-1]
            file_path = f"{path}/{uuid4().hex}.{file_ext}"
            bucket = self.client.storage.from_(REFERENCE_PHOTOS_BUCKET)
            file_options = {"content-type": content_type} if content_type else None
            await bucket.upload(file_path, content, file_options)
            return await bucket.get_public_url(file_path)
        except Exception as e:
            self.handle_error(e)
            return None

    async def get_featured_works(self) -> Optional[list[dict]]:
        if not self.is_supabase_available:
            logger.warning("Supabase not available, returning None for featured works")
            return None

        try:
            response = await (
                self.client.table("portfolio")
                .select("*")
                .eq("featured", True)
                .order("created_at", desc=True)
                .execute()
            )
            return response.data
        except Exception as e:
            self.handle_error(e)
            return None

    async def get_portfolio_items(self, category: Optional[str] = None) -> Optional[list[dict]]:
        """Portfolio pieces, newest first, optionally limited to one category."""
        if not self.is_supabase_available:
            logger.warning("Supabase not available, returning None for portfolio items")
            return None

        try:
            query = self.client.table("portfolio").select("*").order("created_at", desc=True)
            if category:
                query = query.eq("category", category)
            response = await query.execute()
            return response.data
        except Exception as e:
            self.handle_error(e)
            return None

    async def get_flash_designs(self) -> Optional[list[dict]]:
        if not self.is_supabase_available:
            logger.warning("Supabase not available, returning None for flash designs")
            return None

        try:
            response = await (
                self.client.table("flash_designs")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return response.data
        except Exception as e:
            self.handle_error(e)
            return None

    async def get_flash_design_by_id(self, design_id: int) -> Optional[dict]:
        if not self.is_supabase_available:
            logger.warning("Supabase not available, returning None for flash design")
            return None

        try:
            response = await (
                self.client.table("flash_designs")
                .select("*")
                .eq("id", design_id)
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            self.handle_error(e)
            return None

    async def create_flash_design_booking(self, booking_data: Mapping[str, Any]) -> bool:
        """Book a pre-made design. Always stored as a non-custom, pending booking."""
        if not self.is_supabase_available:
            logger.warning("Supabase not available, flash design booking creation skipped")
            return False

        try:
            data = {**booking_data, "is_custom": False, "status": FLASH_BOOKING_STATUS}
            await self.client.table("bookings").insert(data).execute()
            return True
        except Exception as e:
            self.handle_error(e)
            raise

    async def fetch_messages(self, booking_id: str) -> None:
        """Replace the message list with the booking's chat, oldest first."""
        if not booking_id or not self.is_supabase_available:
            logger.warning("Supabase not available or no booking ID, skipping message fetch")
            return

        self.is_fetching_messages = True
        try:
            response = await (
                self.client.table("messages")
                .select("*")
                .eq("booking_id", booking_id)
                .order("created_at")
                .execute()
            )
            self.messages = list(response.data or [])
        except Exception as e:
            self.handle_error(e)
            self.messages = []
        finally:
            self.is_fetching_messages = False

    async def send_message(self, booking_id: str, message: Optional[str]) -> None:
        """Post a chat message as the signed-in user. Failures are only reported."""
        if not message or not message.strip() or not self.is_supabase_available:
            logger.warning("Supabase not available or no message, skipping message send")
            return

        self.is_sending_message = True
        try:
            user_response = await self.client.auth.get_user()
            user = user_response.user if user_response else None
            await self.client.table("messages").insert(
                {
                    "booking_id": booking_id,
                    "message": message.strip(),
                    "sender_id": user.id if user else None,
                }
            ).execute()
        except Exception as e:
            self.handle_error(e)
        finally:
            self.is_sending_message = False

    async def subscribe_to_messages(
        self,
        booking_id: str,
        callback: Optional[Callable[[dict], None]] = None,
    ):
        """Listen for new messages on a booking.

        Each insert is appended to self.messages and passed to callback.
        Returns the realtime channel; release it with unsubscribe().
        """
        if not self.is_supabase_available:
            logger.warning("Supabase not available, skipping message subscription")
            return None

        def on_insert(payload: dict) -> None:
            logger.info("New message received: %s", payload)
            self.messages = [*self.messages, new_record(payload)]
            if callback:
                callback(payload)

        def on_status(status: RealtimeSubscribeStates, err: Optional[Exception]) -> None:
            if status == RealtimeSubscribeStates.SUBSCRIBED:
                logger.info("Subscribed to messages for booking %s", booking_id)
            if status in (RealtimeSubscribeStates.CHANNEL_ERROR, RealtimeSubscribeStates.TIMED_OUT):
                status_name = getattr(status, "value", status)
                self.handle_error(err or RuntimeError(f"Subscription error: {status_name}"))

        channel = self.client.channel(f"public:messages:booking_id=eq.{booking_id}")
        channel.on_postgres_changes(
            "INSERT",
            schema="public",
            table="messages",
            filter=f"booking_id=eq.{booking_id}",
            callback=on_insert,
        )
        await channel.subscribe(on_status)
        return channel

    async def unsubscribe(self, channel) -> None:
        if channel is None or not self.is_supabase_available:
            return
        await self.client.remove_channel(channel)


async def get_studio() -> StudioData:
    """Request-scoped data access: fresh message state and notices per view."""
    return StudioData(await get_supabase())
