from datetime import datetime
from models.db import db


class Notification(db.Model):
    __tablename__ = "notifications"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(160), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, default=False, nullable=False)
    type = db.Column(db.String(40), nullable=False)   # e.g. PAYMENT
    link_id = db.Column(db.String(80), nullable=True)  # id of the related row
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
