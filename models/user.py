from datetime import datetime
from models.db import db
from models.enums import UserRole

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)

    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)
    phone = db.Column(db.String(30), nullable=True)

    role = db.Column(db.String(20), nullable=False, default=UserRole.USER.value)
    # role values: super_admin, owner_cabang, admin_cabang, user

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    bookings = db.relationship("Booking", back_populates="user", lazy=True)
