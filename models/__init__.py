from .db import db
from .user import User
from .branch import Branch
from .field import Field, FieldType
from .booking import Booking
from .payment import Payment
from .notification import Notification
from .activity_log import ActivityLog
