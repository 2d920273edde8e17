"""Notification Service Implementations

Provides concrete implementations for delivering invoice messages.
"""

import logging
from typing import Any, Dict, Optional
import httpx
from src.app.services.notification_service import NotificationError, NotificationService
from src.domain.base import generate_uuid
from src.domain.client import Client
from src.domain.email_log import EmailType
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)

SUBJECTS = {
    EmailType.INVOICE_SENT: "Invoice {number} from {company}",
    EmailType.PAYMENT_REMINDER: "Payment Reminder - Invoice {number}",
    EmailType.PAYMENT_RECEIVED: "Payment Received - Invoice {number}",
    EmailType.STATUS_UPDATE: "Invoice {number} status update",
}


def render_subject(template: EmailType, invoice: Invoice, company_name: str) -> str:
    return SUBJECTS[template].format(number=invoice.invoice_number, company=company_name)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs messages instead of delivering them

    Useful for development and testing, or as a fallback.
    """

    def __init__(self, company_name: str = "Invoice Ledger"):
        self.company_name = company_name

    async def send(
        self,
        invoice: Invoice,
        client: Client,
        template: EmailType,
        recipient: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log the message

        Returns:
            Generated delivery id (logging never fails)
        """
        delivery_id = f"log-{generate_uuid()}"
        logger.info(
            f"[EMAIL] {template.value} to {recipient}: "
            f"'{render_subject(template, invoice, self.company_name)}' "
            f"(amount={invoice.total_amount}, remaining={invoice.remaining_amount}, "
            f"delivery_id={delivery_id})"
        )
        return delivery_id


class WebhookNotificationService(NotificationService):
    """
    Notification service that hands messages to an email gateway via HTTP webhook

    Sends a JSON payload with the template name, the invoice snapshot and the
    template context. The gateway renders and delivers the message.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0, company_name: str = "Invoice Ledger"):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST messages to
            timeout: Request timeout in seconds
            company_name: Sender name used in subjects
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.company_name = company_name

    async def send(
        self,
        invoice: Invoice,
        client: Client,
        template: EmailType,
        recipient: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        POST the message to the webhook

        Returns:
            Delivery id from the gateway response ("email_id" or "id"),
            or a generated one when the gateway returns none

        Raises:
            NotificationError: the request failed or returned an error status
        """
        payload = {
            "type": "invoice_email",
            "template": template.value,
            "recipient": recipient,
            "subject": render_subject(template, invoice, self.company_name),
            "client": {
                "id": client.id,
                "name": client.name,
                "company_name": client.company_name,
            },
            "invoice": invoice.snapshot(),
            "context": context or {},
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as http_client:
                response = await http_client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to deliver {template.value} for invoice {invoice.invoice_number} "
                f"via {self.webhook_url}: {e}"
            )
            raise NotificationError(f"Webhook delivery failed: {e}") from e

        delivery_id = None
        if response.headers.get("content-type", "").startswith("application/json"):
            body = response.json()
            if isinstance(body, dict):
                delivery_id = body.get("email_id") or body.get("id")

        delivery_id = str(delivery_id) if delivery_id else generate_uuid()
        logger.info(
            f"Webhook notification {template.value} for invoice {invoice.invoice_number} "
            f"delivered to {self.webhook_url} (delivery_id={delivery_id})"
        )
        return delivery_id


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook). Every
    channel is attempted; the delivery fails if any channel fails, otherwise
    the last channel's delivery id is returned.
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send(
        self,
        invoice: Invoice,
        client: Client,
        template: EmailType,
        recipient: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        delivery_id = None
        failures = []
        for service in self.services:
            try:
                delivery_id = await service.send(invoice, client, template, recipient, context)
            except NotificationError as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
                failures.append(str(e))

        if failures or delivery_id is None:
            raise NotificationError("; ".join(failures) or "No notification channel configured")
        return delivery_id


def create_notification_service(
    webhook_url: Optional[str] = None,
    timeout: float = 10.0,
    company_name: str = "Invoice Ledger",
) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService(company_name)]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url, timeout, company_name))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
