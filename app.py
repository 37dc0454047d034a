import logging

from flask import Flask
from flask_migrate import Migrate
from flask_socketio import SocketIO

from config import Config
from routes import health_bp, webhook_bp

from models import db
from events.socketio_events import register_socketio_events
from services.payment_reconciliation import PaymentReconciler
from utils.realtime import PushChannel


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(webhook_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Real-time push
    socketio = SocketIO(cors_allowed_origins=app.config.get("SOCKETIO_CORS_ALLOWED_ORIGINS", "*"))
    socketio.init_app(app, message_queue=app.config.get("SOCKETIO_MESSAGE_QUEUE"))
    register_socketio_events(socketio)

    # One reconciliation engine shared by the webhook and the CLI
    app.extensions["payment_reconciler"] = PaymentReconciler(
        push=PushChannel(socketio),
        order_prefix=app.config.get("PAYMENT_ORDER_PREFIX", "PAY-"),
    )

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp


    register_cli(app)


    return app

#-------------------------
import json

import click
from flask import current_app
from flask.cli import AppGroup

from models.enums import PaymentStatus
from services.errors import ReconciliationError

def register_cli(app):
    payments_cli = AppGroup("payments", help="Payment maintenance commands.")

    @payments_cli.command("set-status")
    @click.argument("payment_id", type=int)
    @click.argument("status", type=click.Choice([s.value for s in PaymentStatus]))
    @click.option("--actor-id", type=int, default=None, help="Admin user id recorded in the activity log.")
    @click.option("--note", default=None, help="Reason for the correction.")
    def set_status(payment_id, status, actor_id, note):
        """Correct a payment's status by hand (admin override)."""
        reconciler = current_app.extensions["payment_reconciler"]
        try:
            result = reconciler.correct_status(payment_id, status, actor_id=actor_id, note=note)
        except ReconciliationError as exc:
            raise click.ClickException(str(exc))

        click.echo(f"Payment #{result.payment_id}: {result.previous_status} -> {result.status.value} "
                   f"(field {result.field_status})")

    @payments_cli.command("replay")
    @click.argument("notification_file", type=click.File("r"))
    def replay(notification_file):
        """Run a stored Midtrans notification body through reconciliation."""
        try:
            payload = json.load(notification_file)
        except ValueError as exc:
            raise click.ClickException(f"Not a JSON document: {exc}")

        reconciler = current_app.extensions["payment_reconciler"]
        try:
            result = reconciler.reconcile(payload)
        except ReconciliationError as exc:
            raise click.ClickException(str(exc))

        click.echo(f"Payment #{result.payment_id}: {result.previous_status} -> {result.status.value} "
                   f"(field {result.field_status})")

    app.cli.add_command(payments_cli)

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.extensions["socketio"].run(app, host="127.0.0.1", port=5002)
