"""
Email notifications for core app.

Handles the welcome email sent to newly signed-up users.
"""
import logging
from threading import Thread

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

logger = logging.getLogger(__name__)


def send_welcome_email(*, user, onboarding_url=None):
    """
    Send HTML + text email welcoming a new user and pointing them at onboarding.
    """
    if not user.email:
        logger.info("send_welcome_email: user %s has no email, skipping.", user.pk)
        return

    app_name = getattr(settings, "APP_NAME", "Strength of Faculty")

    context = {
        "user": user,
        "onboarding_url": onboarding_url,
        "app_name": app_name,
    }

    subject = f"Welcome to {app_name}"

    text_body = render_to_string("emails/welcome.txt", context)
    html_body = render_to_string("emails/welcome.html", context)

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[user.email],
    )
    msg.attach_alternative(html_body, "text/html")
    msg.send(fail_silently=False)


def send_welcome_email_async(user, onboarding_url=None):
    """
    Fire-and-forget wrapper: send the email on a background thread so the
    HTTP request isn't blocked by SMTP latency.
    """

    def _worker():
        try:
            send_welcome_email(user=user, onboarding_url=onboarding_url)
        except Exception:
            logger.warning(
                "send_welcome_email_async: error sending email for new user %s",
                user.email or user.username,
                exc_info=True,
            )

    Thread(target=_worker, daemon=True).start()
