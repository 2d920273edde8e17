"""Notification Service Interface

Defines the contract for sending templated messages about invoices.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from src.domain.client import Client
from src.domain.email_log import EmailType
from src.domain.invoice import Invoice


class NotificationError(Exception):
    """Raised when a message could not be handed to the delivery channel"""


class NotificationService(ABC):
    """
    Abstract notification service for client messages

    The template owns the message body; callers only pick the template and
    supply context. Implementations can deliver via:
    - Email service webhook (HTTP POST)
    - Logging (development)
    - etc.
    """

    @abstractmethod
    async def send(
        self,
        invoice: Invoice,
        client: Client,
        template: EmailType,
        recipient: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Send a templated message about an invoice

        Args:
            invoice: Invoice snapshot the message is about
            client: Invoiced client
            template: Message template
            recipient: Destination address
            context: Template extras (custom message, attachment reference, ...)

        Returns:
            Delivery id assigned by the channel

        Raises:
            NotificationError: delivery failed
        """
        pass
