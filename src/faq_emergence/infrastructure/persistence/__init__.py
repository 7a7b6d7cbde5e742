"""
Persistence package

SQLAlchemy-backed parameter store and audit log.
"""

from faq_emergence.infrastructure.persistence.audit_log import AuditLog, SqlAuditLog
from faq_emergence.infrastructure.persistence.database import Database
from faq_emergence.infrastructure.persistence.parameter_store import ParameterStore, SqlParameterStore

__all__ = ["AuditLog", "Database", "ParameterStore", "SqlAuditLog", "SqlParameterStore"]
