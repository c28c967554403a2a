"""
Outgoing mail for course events, sent with the `emails` library and rendered
from the Jinja templates in EMAILS_TEMPLATES_DIR.
"""
import logging
import os
from typing import Any, Dict

import emails
from emails.template import JinjaTemplate

from mini_lms.core.config import settings

logger = logging.getLogger(__name__)

SMTP_OK_CODES = (250, 252)


class TemplateRenderError(Exception):
    pass


def _smtp_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "host": settings.EMAIL_HOST,
        "port": settings.EMAIL_PORT,
        "tls": settings.EMAIL_USE_TLS,
        "ssl": settings.EMAIL_USE_SSL,
    }
    # Anonymous relays get neither user nor password
    if settings.EMAIL_USERNAME:
        options["user"] = settings.EMAIL_USERNAME
        options["password"] = settings.EMAIL_PASSWORD or ""
    return options


def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """
    Returns True when the SMTP server accepted the message. Without EMAIL_HOST
    and EMAIL_FROM_ADDRESS nothing is sent: the message is logged and
    reported as sent.
    """
    if not settings.EMAIL_HOST or not settings.EMAIL_FROM_ADDRESS:
        logger.warning(f"SMTP not configured; logging email to {to_email} instead. Subject: '{subject}'")
        logger.debug(f"Body:\n{html_content[:500]}")
        return True

    message = emails.Message(
        subject=subject,
        html=html_content,
        mail_from=(settings.EMAIL_FROM_NAME, settings.EMAIL_FROM_ADDRESS),
    )
    try:
        response = message.send(to=to_email, smtp=_smtp_options())
    except Exception as e:
        logger.error(f"Exception during email sending to {to_email}: {e}", exc_info=True)
        return False

    if response is not None and response.status_code in SMTP_OK_CODES:
        logger.info(f"Email '{subject}' sent to {to_email}.")
        return True
    logger.error(
        f"SMTP rejected email to {to_email}: status={getattr(response, 'status_code', None)} "
        f"error={getattr(response, 'error', None)}"
    )
    return False


def render_email_template(template_name: str, context: Dict[str, Any]) -> str:
    path = os.path.join(settings.EMAILS_TEMPLATES_DIR, template_name)
    try:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
    except FileNotFoundError:
        logger.error(f"Email template not found: {path}")
        raise TemplateRenderError(f"Email template '{template_name}' not found.")

    try:
        return JinjaTemplate(source).render(**context)
    except Exception as e:
        logger.error(f"Error rendering email template '{template_name}': {e}", exc_info=True)
        raise TemplateRenderError(f"Error rendering email template '{template_name}': {e}")



def send_templated_email(
    to_email: str,
    subject: str,
    html_template_name: str,
    context: Dict[str, Any]
) -> bool:
    """
    Renders an HTML email template and sends it.
    """
    logger.info(f"Preparing templated email. To: {to_email}, Subject: '{subject}', Template: {html_template_name}")

    context.setdefault("APP_NAME", settings.PROJECT_NAME)
    context.setdefault("APP_FRONTEND_URL", settings.APP_FRONTEND_URL)

    try:
        html_content = render_email_template(template_name=html_template_name, context=context)
    except TemplateRenderError:
        logger.error(f"Aborting email to {to_email} due to template rendering error for '{html_template_name}'.")
        return False

    return send_email(to_email=to_email, subject=subject, html_content=html_content)


# --- Notifier operations used by the consistency service ---

def send_course_update_email(trainer_email: str, message: str) -> bool:
    return send_templated_email(
        to_email=trainer_email,
        subject="Course update",
        html_template_name="course_update.html",
        context={"message": message},
    )

def send_takedown_request_email(admin_email: str, course_name: str, trainer_email: str) -> bool:
    return send_templated_email(
        to_email=admin_email,
        subject=f"Takedown requested: {course_name}",
        html_template_name="takedown_request.html",
        context={"course_name": course_name, "trainer_email": trainer_email},
    )

def send_new_course_available_email(learner_email: str, course_name: str) -> bool:
    return send_templated_email(
        to_email=learner_email,
        subject=f"New course available: {course_name}",
        html_template_name="new_course_available.html",
        context={"course_name": course_name},
    )
