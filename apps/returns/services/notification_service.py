"""
Customer emails for returns.

Sending happens after the database work is committed. A failed email is
logged with order and return id and otherwise ignored.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail

from apps.common.money import format_euros

logger = logging.getLogger(__name__)


class ReturnNotificationService:
    """Sends return related emails"""

    @staticmethod
    def _recipient(return_request):
        user = return_request.user
        return user.email if user is not None and user.email else None

    @staticmethod
    def _send(return_request, subject, body):
        recipient = ReturnNotificationService._recipient(return_request)
        if recipient is None:
            logger.info(f"Return {return_request.pk} has no recipient, email skipped")
            return False
        try:
            send_mail(
                subject,
                body,
                getattr(settings, 'RETURNS_NOTIFICATION_FROM_EMAIL', None),
                [recipient],
                fail_silently=False,
            )
            return True
        except Exception as e:
            logger.error(
                f"Return email failed for order {return_request.order_id} "
                f"return {return_request.pk}: {e}"
            )
            return False

    @staticmethod
    def item_line(item):
        options = ', '.join(f"{key}: {value}" for key, value in (item.selected_options or {}).items())
        text = f"{item.quantity} x {item.name}"
        return f"{text} ({options})" if options else text

    @staticmethod
    def send_return_received(return_request):
        order = return_request.order
        name = return_request.user.display_name if return_request.user else 'Kunde'
        lines = [ReturnNotificationService.item_line(item) for item in return_request.items.all()]
        body = "\n".join([
            f"Hello {name},",
            "",
            f"we have received your return request for order {order.order_number}:",
            *lines,
            "",
            "We will let you know as soon as the items have been checked.",
        ])
        return ReturnNotificationService._send(
            return_request, f"Return request for order {order.order_number} received", body
        )

    @staticmethod
    def send_return_completed(return_request):
        order = return_request.order
        name = return_request.user.display_name if return_request.user else 'Kunde'
        items = list(return_request.items.all())
        accepted = [ReturnNotificationService.item_line(item) for item in items if item.accepted and item.quantity]
        rejected = [ReturnNotificationService.item_line(item) for item in items if not item.accepted]

        body = [f"Hello {name},", "", f"your return for order {order.order_number} has been processed."]
        if accepted:
            body += ["", "Accepted:", *accepted]
        if rejected:
            body += ["", "Not accepted:", *rejected]
        if return_request.refund_amount_cents:
            body += ["", f"Refund: {format_euros(return_request.refund_amount_cents)}"]
        if return_request.points_deducted:
            body += [f"Bonus points deducted: {return_request.points_deducted}"]

        return ReturnNotificationService._send(
            return_request, f"Return for order {order.order_number} processed", "\n".join(body)
        )

    @staticmethod
    def send_return_rejected(return_request):
        order = return_request.order
        name = return_request.user.display_name if return_request.user else 'Kunde'
        body = [f"Hello {name},", "", f"your return request for order {order.order_number} was rejected."]
        if return_request.notes:
            body += ["", return_request.notes]
        return ReturnNotificationService._send(
            return_request, f"Return for order {order.order_number} rejected", "\n".join(body)
        )
