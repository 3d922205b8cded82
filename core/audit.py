"""
Audit trail helper.

Audit entries are emitted on the dedicated 'fulfillment.audit' logger with
raw structured fields; redaction and transport belong to the logging setup.
"""

import logging

audit_logger = logging.getLogger('fulfillment.audit')


def audit(event: str, message: str, **fields):
    """Emit one audit entry."""
    audit_logger.info(message, extra={'event': event, **fields})
