"""
Store Errors

Both errors are local and recoverable: the UI shows the message and the
store state is left exactly as it was before the failed call.
"""

from typing import Optional


REQUIRED_FIELDS_MESSAGE = "Please fill all required fields"


class StoreError(Exception):
    """Base class for record and ledger store errors."""
    pass


class ValidationError(StoreError):
    """
    Input rejected before any state was touched.

    `fields` lists the offending field keys (or attribute names) and
    `message` is safe to show to the user.
    """

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        self.message = message
        self.fields = list(fields or [])
        super().__init__(message)


class NotFoundError(StoreError):
    """An operation referenced an id that does not exist."""

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")
