"""Optional feature integrations.

- audit: Audit logging of block and bypass decisions
"""

from cmdblocker.integrations.audit import AuditContext, AuditEvent, AuditLogger, get_audit_logger

__all__ = [
    "AuditContext",
    "AuditEvent",
    "AuditLogger",
    "get_audit_logger",
]
