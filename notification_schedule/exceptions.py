"""
Errors and submission results for the scheduling core
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

# Which OS collaborator refused a call
ErrorSource = Literal[
  "notification_center",  # Calendar trigger queue (modern API)
  "local_queue",  # Fire-date queue (legacy API)
  "unknown",
]

SubmissionStatus = Literal["submitted", "rejected"]


class ErrorResponse(BaseModel):
  """Serializable view of a NotificationError"""

  description: str = Field(..., description="Human-readable error message")
  name: str = Field(..., description="SCHEDULE_REJECTED or CANCEL_REJECTED")
  source: ErrorSource = Field(..., description="Collaborator that refused the call")
  caused_by: Optional[str] = Field(
    None, description="Type and message of the OS-layer exception"
  )


class NotificationError(Exception):
  """An OS collaborator refused a schedule or cancel call synchronously.

  Schedulers never raise it: it is folded into a rejected SubmissionResult.
  """

  def __init__(
    self,
    description: str,
    name: str,
    source: ErrorSource = "unknown",
    caused_by: Optional[str] = None,
  ):
    super().__init__(description)
    self.description = description
    self.name = name
    self.source = source
    self.caused_by = caused_by

  def to_response(self) -> ErrorResponse:
    return ErrorResponse(
      description=self.description,
      name=self.name,
      source=self.source,
      caused_by=self.caused_by,
    )

  @classmethod
  def from_exception(
    cls,
    e: Exception,
    name: str,
    source: ErrorSource,
    context: Optional[str] = None,
  ) -> "NotificationError":
    """Wrap an OS-layer exception, prefixing its message with `context`"""
    description = f"{context}: {e}" if context else str(e)
    error = cls(description, name, source, caused_by=f"{type(e).__name__}: {e}")
    error.__cause__ = e
    return error


class SubmissionResult(BaseModel):
  """Outcome of handing a schedule or cancel call to the OS.

  "submitted" only means the OS accepted the call synchronously. Delivery,
  authorization and later OS-side failures are never reported back.
  """

  status: SubmissionStatus
  identifiers: list[str] = Field(default_factory=list)
  error: Optional[ErrorResponse] = None

  @property
  def ok(self) -> bool:
    return self.status == "submitted"

  @classmethod
  def submitted(cls, *identifiers: str) -> "SubmissionResult":
    return cls(status="submitted", identifiers=list(identifiers))

  @classmethod
  def rejected(
    cls, error: NotificationError, *identifiers: str
  ) -> "SubmissionResult":
    return cls(
      status="rejected", identifiers=list(identifiers), error=error.to_response()
    )
