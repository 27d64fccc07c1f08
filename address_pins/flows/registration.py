"""Address registration workflow.

One instance backs one form. ``submit`` walks

    IDLE -> VALIDATING -> NORMALIZING -> GEOCODING -> PERSISTING -> DONE

and leaves through VALIDATION_FAILED, NO_MATCH, GEOCODE_FAILED or
STORE_FAILED on error, in which case nothing is written and the instance is
back to IDLE. The store is touched only after a candidate was found, and at
most once per submission.
"""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable

from address_pins.common.constants import (
    MESSAGE_GEOCODE_FAILED,
    MESSAGE_NO_MATCH,
    MESSAGE_STORE_FAILED,
    MESSAGE_VALIDATION,
    REQUIRED_FORM_FIELDS,
)
from address_pins.common.errors import (
    AddressPinsError,
    GeocodeNoMatchError,
    GeocodeServiceError,
    StoreError,
    ValidationError,
    WorkflowBusyError,
)
from address_pins.common.logging import get_logger, log_event
from address_pins.common.models import FormFields, UserRecord
from address_pins.common.text import compose_address_line, normalize_text
from address_pins.geocoding.base import Geocoder
from address_pins.storage.record_store import RecordStore

FIELD_LABELS = {"street": "rua", "city": "cidade", "state": "estado"}


class WorkflowState(str, enum.Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    NORMALIZING = "normalizing"
    GEOCODING = "geocoding"
    PERSISTING = "persisting"
    DONE = "done"
    VALIDATION_FAILED = "validation_failed"
    NO_MATCH = "no_match"
    GEOCODE_FAILED = "geocode_failed"
    STORE_FAILED = "store_failed"


@dataclass(frozen=True)
class WorkflowOutcome:
    state: WorkflowState
    message: str | None = None
    record: UserRecord | None = None
    address_line: str | None = None
    error_code: str | None = None
    trail: tuple[WorkflowState, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.state is WorkflowState.DONE


def validate_form(form: FormFields) -> None:
    missing = form.missing_required(REQUIRED_FORM_FIELDS)
    if missing:
        raise ValidationError(missing)


def build_address_line(form: FormFields, *, include_house_number: bool = False) -> str:
    line = compose_address_line(
        form.street,
        form.city,
        form.state,
        number=form.number if include_house_number else None,
    )
    return normalize_text(line)


class RegistrationWorkflow:
    def __init__(
        self,
        geocoder: Geocoder,
        store: RecordStore,
        *,
        on_done: Callable[[UserRecord], object] | None = None,
        include_house_number: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.store = store
        self.on_done = on_done
        self.include_house_number = include_house_number
        self.logger = logger or get_logger()
        self.state = WorkflowState.IDLE
        self._in_flight = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._in_flight.locked()

    def _enter(self, state: WorkflowState, trail: list[WorkflowState]) -> None:
        self.state = state
        trail.append(state)
        log_event(self.logger, f"workflow {state.value}", level=logging.DEBUG, component="registration", event="WORKFLOW_STATE", status="ok")

    def _fail(
        self,
        state: WorkflowState,
        message: str,
        exc: AddressPinsError,
        trail: list[WorkflowState],
        address_line: str | None = None,
    ) -> WorkflowOutcome:
        self._enter(state, trail)
        log_event(
            self.logger,
            f"registration failed: {exc}",
            level=logging.WARNING,
            component="registration",
            event="WORKFLOW_DONE",
            status="error",
            error_code=exc.error_code,
        )
        self.state = WorkflowState.IDLE
        return WorkflowOutcome(
            state=state,
            message=message,
            address_line=address_line,
            error_code=exc.error_code,
            trail=tuple(trail),
        )

    def submit(self, form: FormFields) -> WorkflowOutcome:
        if not self._in_flight.acquire(blocking=False):
            raise WorkflowBusyError("A registration is already in progress for this form")
        try:
            return self._run(form)
        finally:
            self._in_flight.release()

    def _run(self, form: FormFields) -> WorkflowOutcome:
        trail: list[WorkflowState] = [WorkflowState.IDLE]

        self._enter(WorkflowState.VALIDATING, trail)
        try:
            validate_form(form)
        except ValidationError as exc:
            labels = ", ".join(FIELD_LABELS.get(name, name) for name in exc.missing_fields)
            return self._fail(WorkflowState.VALIDATION_FAILED, MESSAGE_VALIDATION.format(fields=labels), exc, trail)

        self._enter(WorkflowState.NORMALIZING, trail)
        address_line = build_address_line(form, include_house_number=self.include_house_number)

        self._enter(WorkflowState.GEOCODING, trail)
        try:
            candidates = self.geocoder.geocode(address_line)
        except GeocodeServiceError as exc:
            return self._fail(WorkflowState.GEOCODE_FAILED, MESSAGE_GEOCODE_FAILED, exc, trail, address_line)
        if not candidates:
            exc = GeocodeNoMatchError(f"No candidates for {address_line!r}")
            return self._fail(WorkflowState.NO_MATCH, MESSAGE_NO_MATCH, exc, trail, address_line)

        try:
            record = UserRecord.from_form(form, candidates[0])
        except (TypeError, ValueError) as exc:
            bad = GeocodeServiceError(f"Unusable candidate for {address_line!r}: {exc}")
            return self._fail(WorkflowState.GEOCODE_FAILED, MESSAGE_GEOCODE_FAILED, bad, trail, address_line)

        self._enter(WorkflowState.PERSISTING, trail)
        try:
            records = self.store.load()
            records.append(record)
            self.store.save(records)
        except StoreError as exc:
            return self._fail(WorkflowState.STORE_FAILED, MESSAGE_STORE_FAILED, exc, trail, address_line)

        self._enter(WorkflowState.DONE, trail)
        log_event(
            self.logger,
            f"registered {record.name!r}",
            component="registration",
            event="WORKFLOW_DONE",
            status="ok",
            record_count=len(records),
        )
        # The record is persisted; the form is reusable whatever navigation does.
        self.state = WorkflowState.IDLE
        if self.on_done is not None:
            self.on_done(record)
        return WorkflowOutcome(
            state=WorkflowState.DONE,
            record=record,
            address_line=address_line,
            trail=tuple(trail),
        )
