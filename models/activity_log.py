from datetime import datetime
from models.db import db

class ActivityLog(db.Model):
    __tablename__ = "activity_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)  # nullable for system events
    action = db.Column(db.String(160), nullable=False)  # e.g. "Payment paid for booking 7"
    details = db.Column(db.Text, nullable=True)         # JSON-encoded context

    ip_address = db.Column(db.String(64), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
