"""
Collaborator implementations.
"""

from .local import LoggingNotificationSink, ManualClaimReversalService

__all__ = ["LoggingNotificationSink", "ManualClaimReversalService"]
