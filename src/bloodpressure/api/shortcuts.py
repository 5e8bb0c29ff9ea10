"""Voice command and shortcut entry point for adding a reading.

The intent takes three integers, writes them through ``ReadingWriter`` and
renders one of two fixed dialogs. The error kind never reaches the user;
it is logged and kept on the ``IntentOutcome`` for callers that want it.
"""

import asyncio
import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from bloodpressure.core.config import get_settings
from bloodpressure.core.exceptions import BloodPressureBaseError, StoreTimeoutError
from bloodpressure.models.readings import Reading
from bloodpressure.services.reading_writer import ReadingWriter

logger = logging.getLogger(__name__)

SUCCESS_DIALOG = "Successfully saved to Health."
FAILURE_DIALOG = "Couldn't save to Health."

SHORTCUT_SHORT_TITLE = "Add Data"
SHORTCUT_PHRASES = (
    "Record blood pressure measurement {app_name}",
    "Add blood pressure data with {app_name}",
    "Add blood pressure data",
    "Record measurement",
)


def shortcut_phrases(app_name: str) -> list[str]:
    """Invocation phrases with the application name filled in."""
    return [phrase.format(app_name=app_name) for phrase in SHORTCUT_PHRASES]


class IntentOutcome(BaseModel):
    """Result of running an intent, before it is collapsed to a dialog."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    reading: Reading | None = None
    error: BloodPressureBaseError | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def dialog(self) -> str:
        return SUCCESS_DIALOG if self.success else FAILURE_DIALOG


class AddReadingIntent(BaseModel):
    """Add blood pressure and heart rate measured with an external device."""

    title: ClassVar[str] = "Add Blood Pressure Data"
    description: ClassVar[str] = (
        "Add Blood Pressure and Heart Rate data measured with external device "
        "into the Health app."
    )

    model_config = ConfigDict(frozen=True, strict=True)

    systolic: int = Field(title="Systolic Value (mmHg)")
    diastolic: int = Field(title="Diastolic Value (mmHg)")
    heart_rate: int = Field(title="Heart Rate (BPM)")

    async def run(
        self, writer: ReadingWriter, *, timeout_seconds: float | None = None
    ) -> IntentOutcome:
        """Save the reading and report what happened without raising.

        Args:
            writer: Writer bound to the health store
            timeout_seconds: Limit for the save; defaults to the configured
                store timeout
        """
        if timeout_seconds is None:
            timeout_seconds = get_settings().store_timeout_seconds

        try:
            async with asyncio.timeout(timeout_seconds):
                reading = await writer.save(
                    self.systolic, self.diastolic, self.heart_rate
                )
        except TimeoutError:
            error = StoreTimeoutError("save", timeout_seconds)
            logger.error("Add reading intent failed: %s", error)
            return IntentOutcome(error=error)
        except BloodPressureBaseError as e:
            logger.error("Add reading intent failed: %s", e, exc_info=e)
            return IntentOutcome(error=e)

        return IntentOutcome(reading=reading)

    async def perform(
        self, writer: ReadingWriter, *, timeout_seconds: float | None = None
    ) -> str:
        """Save the reading and return the dialog shown to the user."""
        outcome = await self.run(writer, timeout_seconds=timeout_seconds)
        return outcome.dialog
