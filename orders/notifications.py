"""
Refund notifications.

The return processor hands over plain data (order id, refund total) once a
return has committed; composing and delivering the message happens here.
The implementation is chosen with the REFUND_NOTIFIER_CLASS setting.
"""
from decimal import Decimal
import logging

from django.conf import settings
from django.core.mail import send_mail

from .models import Order

logger = logging.getLogger(__name__)


class RefundNotifier:
    """Interface for refund notifications."""

    def refund_processed(self, order_id: int, refund_total: Decimal) -> None:
        raise NotImplementedError


class LoggingRefundNotifier(RefundNotifier):
    """Record the refund in the application log only."""

    def refund_processed(self, order_id, refund_total):
        logger.info(
            f"Refund of ${refund_total} processed for order {order_id}",
            extra={'event': 'notifications.refund_processed', 'order_id': order_id},
        )


class EmailRefundNotifier(RefundNotifier):
    """
    Email the order owner about their refund.

    Uses Django's configured EMAIL_BACKEND and DEFAULT_FROM_EMAIL.
    """

    def refund_processed(self, order_id, refund_total):
        order = Order.objects.select_related('user').get(pk=order_id)
        recipient = order.user.email
        if not recipient:
            logger.warning(
                f"Order {order_id} owner has no email address; refund notice not sent",
                extra={'event': 'notifications.no_recipient', 'order_id': order_id},
            )
            return

        send_mail(
            subject=f"Your return for order #{order_id} has been processed",
            message=(
                f"We have processed your return for order #{order_id}.\n"
                f"A refund of ${refund_total} will be issued to your original payment method.\n"
            ),
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient],
            fail_silently=False,
        )
        logger.info(
            f"Refund email sent for order {order_id}",
            extra={'event': 'notifications.refund_emailed', 'order_id': order_id},
        )
