# =============================================================================
# app/forms/state.py - Form UI State
# =============================================================================
# The state every auth form carries between renders:
#
#   idle -> submitting -> success (navigate / show message)
#                      -> error   (message shown, form usable again)
#
# Password visibility is a separate toggle and never touches `status`.
# =============================================================================

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FormStatus(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class FormState(BaseModel):
    """
    Mutable view state of one form.

    `field_errors` maps a field name to its inline message; `error` is the
    form-level message shown above the fields.
    """
    status: FormStatus = FormStatus.IDLE
    error: Optional[str] = None
    success_message: Optional[str] = None
    field_errors: dict[str, str] = Field(default_factory=dict)
    show_password: bool = False

    @property
    def is_loading(self) -> bool:
        """True while a request is in flight; the submit control is disabled."""
        return self.status == FormStatus.SUBMITTING

    def start_submit(self) -> None:
        self.status = FormStatus.SUBMITTING
        self.error = None
        self.success_message = None
        self.field_errors = {}

    def succeed(self, message: Optional[str] = None) -> None:
        self.status = FormStatus.SUCCESS
        self.success_message = message

    def fail(
        self,
        message: Optional[str] = None,
        field_errors: Optional[dict[str, str]] = None,
    ) -> None:
        self.status = FormStatus.ERROR
        self.error = message
        self.field_errors = field_errors or {}

    def toggle_password_visibility(self) -> bool:
        self.show_password = not self.show_password
        return self.show_password
