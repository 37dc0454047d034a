import json
from flask import has_request_context, request
from models import db
from models.activity_log import ActivityLog

def _client_ip():
    if not has_request_context():
        return None
    return request.headers.get("X-Forwarded-For", request.remote_addr)

def log_activity(action: str, user_id=None, details=None, ip_address=None, session=None) -> ActivityLog:
    """
    Stage an activity log row on `session` (db.session by default). The caller
    commits, so the row lands in the same transaction as the change it describes.
    """
    row = ActivityLog(
        user_id=user_id,
        action=action[:160],
        details=json.dumps(details, default=str) if details is not None else None,
        ip_address=ip_address or _client_ip(),
    )
    (session if session is not None else db.session).add(row)
    return row
