from datetime import datetime
from models.db import db
from models.enums import FieldStatus

class FieldType(db.Model):
    __tablename__ = "field_types"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(80), unique=True, nullable=False)


class Field(db.Model):
    __tablename__ = "fields"

    id = db.Column(db.Integer, primary_key=True)

    branch_id = db.Column(db.Integer, db.ForeignKey("branches.id"), nullable=False, index=True)
    type_id = db.Column(db.Integer, db.ForeignKey("field_types.id"), nullable=False, index=True)
    name = db.Column(db.String(120), nullable=False)

    price_day = db.Column(db.Numeric(10, 2), nullable=False)
    price_night = db.Column(db.Numeric(10, 2), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=FieldStatus.AVAILABLE.value)
    # status values: available, booked, maintenance, closed

    image_url = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    branch = db.relationship("Branch", back_populates="fields")
    field_type = db.relationship("FieldType")

    __table_args__ = (
        db.UniqueConstraint("branch_id", "name", name="uq_field_branch_name"),
    )

    @property
    def full_price(self):
        # Night tariff is the full price a down payment is measured against
        return self.price_night
