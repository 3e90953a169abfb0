# core/errors.py
"""
Exceptions raised by the tracker outside the registry and ledger.
The registry and ledger themselves report failure through return values.
"""


class TrackerError(Exception):
    """Base class for tracker errors."""


class DeliveryFailure(TrackerError):
    """A snapshot could not be handed to an observer."""
