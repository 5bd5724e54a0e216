# folio/contact.py
"""Contact form submission lifecycle.

A :class:`ContactFormMachine` moves through ``idle -> sending -> success|error``
and returns to ``idle`` after ``reset_delay`` seconds. Delivery is delegated to
a :class:`ContactSender`; the default :class:`SimulatedSender` waits a fixed
delay and always succeeds.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Union

import aiosqlite

from folio.config import CONTACT_BACKEND, CONTACT_RESET_DELAY, CONTACT_SEND_DELAY
from folio.constants import ERROR_MESSAGES
from folio.database import SiteDatabase
from folio.models.schemas import ContactFormData

logger = logging.getLogger(__name__)


class ContactStatus(str, Enum):
    IDLE = 'idle'
    SENDING = 'sending'
    SUCCESS = 'success'
    ERROR = 'error'


class ContactDeliveryError(Exception):
    """Raised by a sender when a message could not be delivered."""


class ContactFormBusy(Exception):
    """Raised when submitting while a previous submission has not returned to idle."""


TransitionCallback = Callable[[ContactStatus, ContactStatus], Any]


class ContactSender(ABC):
    @abstractmethod
    async def send(self, form: ContactFormData) -> None:
        """Deliver the message or raise ContactDeliveryError."""


class SimulatedSender(ContactSender):
    """Resolves to success after a fixed delay; nothing leaves the process."""

    def __init__(self, delay: float = CONTACT_SEND_DELAY):
        self.delay = delay

    async def send(self, form: ContactFormData) -> None:
        await asyncio.sleep(self.delay)
        logger.info(f"Contact form submitted (simulated): subject={form.subject!r} from={form.email}")


class DatabaseSender(ContactSender):
    """Persists messages to the site database."""

    def __init__(self, db: SiteDatabase):
        self.db = db

    async def send(self, form: ContactFormData) -> None:
        try:
            await self.db.save_contact_message(form)
        except (aiosqlite.Error, OSError) as e:
            logger.error(f"Failed to store contact message: {e}", exc_info=True)
            raise ContactDeliveryError(str(e)) from e


def create_sender(db: Optional[SiteDatabase] = None) -> ContactSender:
    """Build the sender selected by CONTACT_BACKEND."""
    if CONTACT_BACKEND == 'sqlite':
        return DatabaseSender(db or SiteDatabase())
    return SimulatedSender()


class ContactFormMachine:
    def __init__(
        self,
        sender: Optional[ContactSender] = None,
        reset_delay: float = CONTACT_RESET_DELAY,
    ):
        self.sender = sender or SimulatedSender()
        self.reset_delay = reset_delay
        self.status = ContactStatus.IDLE
        self.error_message: Optional[str] = None
        self._listeners: List[TransitionCallback] = []
        self._reset_task: Optional[asyncio.Task] = None

    def on_transition(self, callback: TransitionCallback) -> None:
        """Register a callback invoked with (previous, current) on every state change."""
        self._listeners.append(callback)

    def _transition(self, status: ContactStatus) -> None:
        previous, self.status = self.status, status
        logger.debug(f"Contact form: {previous.value} -> {status.value}")
        for callback in self._listeners:
            callback(previous, status)

    async def submit(
        self,
        data: Union[ContactFormData, Mapping[str, Any]],
        auto_reset: bool = True,
    ) -> ContactStatus:
        """Validate and deliver one submission, returning the final status (success or error).

        Invalid data raises pydantic.ValidationError and leaves the machine idle.
        """
        if self.status != ContactStatus.IDLE:
            raise ContactFormBusy(f"Contact form is {self.status.value}")

        form = data if isinstance(data, ContactFormData) else ContactFormData.model_validate(data)

        self.error_message = None
        self._transition(ContactStatus.SENDING)
        try:
            await self.sender.send(form)
        except ContactDeliveryError:
            self._fail()
        except Exception as e:
            logger.error(f"Unexpected contact sender failure: {e}", exc_info=True)
            self._fail()
        else:
            self._transition(ContactStatus.SUCCESS)
        finally:
            # Cancelled mid-send: give the form back instead of leaving it in sending
            if self.status == ContactStatus.SENDING:
                self._transition(ContactStatus.IDLE)

        if auto_reset:
            self._reset_task = asyncio.create_task(self._reset_after_delay())
        return self.status

    def _fail(self) -> None:
        self.error_message = ERROR_MESSAGES['generic']
        self._transition(ContactStatus.ERROR)

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self.reset_delay)
        self.error_message = None
        self._transition(ContactStatus.IDLE)

    async def wait_for_reset(self) -> None:
        """Wait until a scheduled return to idle has happened."""
        if self._reset_task is not None:
            await self._reset_task

    async def close(self) -> None:
        """Cancel a pending reset."""
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
            try:
                await self._reset_task
            except asyncio.CancelledError:
                pass
