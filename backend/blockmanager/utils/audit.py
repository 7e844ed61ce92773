from blockmanager.extensions import db
from blockmanager.models.audit_log import AuditLog
from typing import Optional

def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    actor_id: Optional[str] = None,
    payload: dict | None = None
):
    log = AuditLog()

    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
