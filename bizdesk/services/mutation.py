"""
Mutation protocol — create / update / delete round-trips.

    Create  validate locally → collaborator.create → success state, the UI
            navigates away after REDIRECT_DELAY_SECONDS. On failure the form
            keeps its values and shows the error banner.
    Update  pre-populate from a fetched + normalized record; only the fields
            the acting role may edit are validated and sent.
    Delete  explicit confirmation naming the record; buttons disabled while
            the call is in flight; on success the record is removed from the
            local list by id (no re-fetch), on failure the list is unchanged.

Nothing is retried. Duplicate submission is prevented only by the in-flight
flag on FormState / DeleteDialog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from bizdesk.core.exceptions import (
    CollaboratorError,
    ValidationError,
    user_message,
)
from bizdesk.services import view_state
from bizdesk.services.payloads import (
    build_create_payload,
    build_update_payload,
    editable_fields,
)

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_DELAY = 1.5


class MutationService:
    """Create/update/delete for one entity through its collaborator."""

    def __init__(self, spec, api, *, redirect_delay: float = DEFAULT_REDIRECT_DELAY) -> None:
        self.spec = spec
        self.api = api
        self.redirect_delay = redirect_delay

    def create(self, values: dict):
        payload = build_create_payload(self.spec.name, values)
        try:
            raw = self.api.create(payload)
        except CollaboratorError:
            logger.exception("Create %s failed", self.spec.name, extra={"entity": self.spec.name})
            raise
        record = self.spec.normalize(raw)
        logger.info("Created %s id=%s", self.spec.name, record.id,
                    extra={"entity": self.spec.name, "record_id": record.id})
        return record

    def fetch(self, record_id: int):
        try:
            raw = self.api.get_by_id(record_id)
        except CollaboratorError:
            logger.exception("Fetch %s id=%s failed", self.spec.name, record_id,
                             extra={"entity": self.spec.name, "record_id": record_id})
            raise
        return self.spec.normalize(raw)

    def load_for_edit(self, record_id: int, role: str) -> tuple:
        """Return ``(record, form_values)`` restricted to the editable fields."""
        fields = editable_fields(self.spec.name, role)
        record = self.fetch(record_id)
        canonical = record.to_dict()
        return record, {name: canonical.get(name) for name in fields}

    def update(self, record_id: int, values: dict, role: str, current=None):
        """Send the editable subset of ``values``; returns the updated record.

        ``current`` is the pre-edit record. Some endpoints answer an update
        with an empty body; the payload is then laid over ``current`` (fetched
        when not given) so untouched fields keep their values.
        """
        payload = build_update_payload(self.spec.name, values, role)
        try:
            raw = self.api.update(record_id, payload)
        except CollaboratorError:
            logger.exception("Update %s id=%s failed", self.spec.name, record_id,
                             extra={"entity": self.spec.name, "record_id": record_id})
            raise
        if raw:
            return self.spec.normalize(raw)
        if current is None:
            try:
                current = self.fetch(record_id)
            except CollaboratorError:
                logger.warning("Re-reading %s id=%s after update failed", self.spec.name,
                               record_id, extra={"entity": self.spec.name, "record_id": record_id})
        base = current.to_dict() if current is not None else {}
        return self.spec.normalize({**base, **payload, "id": record_id})

    def delete(self, record_id: int) -> None:
        try:
            self.api.delete(record_id)
        except CollaboratorError:
            logger.exception("Delete %s id=%s failed", self.spec.name, record_id,
                             extra={"entity": self.spec.name, "record_id": record_id})
            raise
        logger.info("Deleted %s id=%s", self.spec.name, record_id,
                    extra={"entity": self.spec.name, "record_id": record_id})


# ── Form state ───────────────────────────────────────────────────────────────


@dataclass
class FormState:
    """One create/edit form.

    ``values`` survive a failed submit so the user can correct and resubmit.
    """

    values: dict = field(default_factory=dict)
    submitting: bool = False
    success: bool = False
    error: str | None = None
    error_details: dict = field(default_factory=dict)
    redirect_after: float | None = None
    result: object = None

    @property
    def submit_disabled(self) -> bool:
        return self.submitting

    def dismiss_error(self) -> None:
        self.error = None
        self.error_details = {}

    def submit(self, action, *, redirect_after: float | None = None,
               fallback: str = "Failed to save. Please try again.") -> bool:
        """Run ``action(values)``; returns False when a submit is already in flight."""
        if self.submitting:
            logger.debug("Duplicate submit ignored while a request is in flight")
            return False
        self.submitting = True
        self.success = False
        self.dismiss_error()
        try:
            self.result = action(dict(self.values))
        except ValidationError as exc:
            self.error = str(exc)
            self.error_details = dict(exc.details)
        except Exception as exc:
            logger.exception("Form submit failed")
            self.error = user_message(exc, fallback)
        else:
            self.success = True
            self.redirect_after = redirect_after
        finally:
            self.submitting = False
        return True


def submit_create(form: FormState, service: MutationService) -> bool:
    return form.submit(service.create, redirect_after=service.redirect_delay,
                       fallback=f"Failed to create {service.spec.label.lower()}")


def submit_update(form: FormState, service: MutationService, record_id: int, role: str,
                  current=None) -> bool:
    return form.submit(lambda values: service.update(record_id, values, role, current),
                       fallback=f"Failed to update {service.spec.label.lower()}")


# ── Delete confirmation ──────────────────────────────────────────────────────


@dataclass
class DeleteDialog:
    """Confirmation step in front of ``MutationService.delete``."""

    service: MutationService
    target: object = None
    busy: bool = False

    @property
    def is_open(self) -> bool:
        return self.target is not None

    @property
    def buttons_disabled(self) -> bool:
        return self.busy

    @property
    def prompt(self) -> str:
        if self.target is None:
            return ""
        label = self.service.spec.label.lower()
        name = (getattr(self.target, "title", "") or getattr(self.target, "name", "")
                or getattr(self.target, "email", "") or f"#{self.target.id}")
        return f"Are you sure you want to delete {label} \"{name}\"?"

    def open(self, record) -> None:
        if self.busy:
            return
        self.target = record

    def cancel(self) -> None:
        if self.busy:
            return
        self.target = None

    def confirm(self, state: view_state.ListViewState) -> view_state.ListViewState:
        """Delete the target and return the updated list state.

        Success removes the record by id; failure returns ``state`` with only
        its error banner set.
        """
        if self.target is None or self.busy:
            return state
        record_id = self.target.id
        self.busy = True
        try:
            self.service.delete(record_id)
        except Exception as exc:
            logger.warning("Delete dialog for %s id=%s failed: %s",
                           self.service.spec.name, record_id, exc)
            message = user_message(exc, f"Failed to delete {self.service.spec.label.lower()}")
            return replace(state, error=message)
        else:
            return view_state.record_removed(state, record_id)
        finally:
            self.busy = False
            self.target = None
