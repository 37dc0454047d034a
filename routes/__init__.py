from .health import health_bp
from .midtrans_webhook import webhook_bp
