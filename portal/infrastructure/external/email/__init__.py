"""Credential email notifiers."""

from portal.infrastructure.external.email.factory import create_notifier
from portal.infrastructure.external.email.log_notifier import LogOnlyNotifier
from portal.infrastructure.external.email.resend_notifier import ResendNotifier

__all__ = ["LogOnlyNotifier", "ResendNotifier", "create_notifier"]
