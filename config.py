import os

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    # SQLite database file stored beside the code as fieldbooking.db
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "fieldbooking.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Midtrans
    MIDTRANS_SERVER_KEY = os.getenv("MIDTRANS_SERVER_KEY")
    # Signature is checked whenever a server key is configured
    MIDTRANS_VERIFY_SIGNATURE = os.getenv("MIDTRANS_VERIFY_SIGNATURE", "true").lower() == "true"

    # Order ids sent to Midtrans look like PAY-<payment id>[-suffix]
    PAYMENT_ORDER_PREFIX = os.getenv("PAYMENT_ORDER_PREFIX", "PAY-")

    # Socket.IO
    SOCKETIO_MESSAGE_QUEUE = os.getenv("SOCKETIO_MESSAGE_QUEUE")  # e.g. redis://localhost:6379
    SOCKETIO_CORS_ALLOWED_ORIGINS = os.getenv("SOCKETIO_CORS_ALLOWED_ORIGINS", "*")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Basic app settings
    DEBUG = False
