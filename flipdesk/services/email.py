"""
Email service using SendGrid.

Falls back to console logging if SendGrid is not configured.
"""

import html
import logging
from typing import Optional

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, Email, To, Content

from flipdesk.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_STYLE = """
    body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .button { display: inline-block; padding: 12px 24px; background-color: #3b82f6; color: white; text-decoration: none; border-radius: 6px; font-weight: 500; }
    .message { white-space: pre-wrap; background: #f0f2f5; padding: 12px; border-radius: 6px; }
    .footer { margin-top: 30px; font-size: 12px; color: #666; }
"""


def _wrap_html(body: str) -> str:
    return f"""
        <!DOCTYPE html>
        <html>
        <head>
            <style>{_STYLE}</style>
        </head>
        <body>
            <div class="container">
                {body}
            </div>
        </body>
        </html>
        """


class EmailService:
    """Email service with SendGrid integration."""

    def __init__(self):
        self.api_key = settings.sendgrid_api_key
        self.from_email = settings.sendgrid_from_email
        self.from_name = settings.sendgrid_from_name
        self.frontend_url = settings.frontend_url
        self.client = None

        if self.api_key:
            self.client = SendGridAPIClient(self.api_key)

    def _send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
    ) -> bool:
        """
        Send an email.

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML email body

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.client:
            # Log email to console if SendGrid not configured
            logger.info(
                f"[EMAIL - Console Mode]\n"
                f"To: {to_email}\n"
                f"Subject: {subject}\n"
                f"Content:\n{html_content}\n"
            )
            return True

        try:
            message = Mail(
                from_email=Email(self.from_email, self.from_name),
                to_emails=To(to_email),
                subject=subject,
                html_content=Content("text/html", html_content),
            )

            response = self.client.send(message)

            if 200 <= response.status_code < 300:
                logger.info(f"Email sent successfully to {to_email}")
                return True

            logger.error(
                f"Failed to send email: {response.status_code} - {response.body}"
            )
            return False

        except Exception as e:
            logger.error(f"Error sending email: {str(e)}")
            return False

    def send_welcome_email(self, to_email: str, full_name: Optional[str] = None) -> bool:
        """Send a welcome email after signup."""
        greeting = f"Hi {html.escape(full_name)}" if full_name else "Welcome"
        listings_url = f"{self.frontend_url}/dashboard"

        subject = f"Welcome to {settings.app_name}"
        html_content = _wrap_html(f"""
                <h1>{greeting}!</h1>
                <p>Your account has been created. You can now list off-market properties
                and run flip analyses on {settings.app_name}.</p>
                <p style="margin: 30px 0;">
                    <a href="{listings_url}" class="button">Go to Dashboard</a>
                </p>
        """)

        return self._send_email(to_email, subject, html_content)

    def send_seller_contact_email(
        self,
        to_email: str,
        property_title: str,
        property_id: str,
        sender_contact: str,
        message: str,
    ) -> bool:
        """
        Forward a buyer's inquiry to the listing's seller.

        Args:
            to_email: Seller email address
            property_title: Listing title, used in the subject
            property_id: Listing ID, used for the link back
            sender_contact: How the buyer wants to be reached (email or phone)
            message: Free-text message from the buyer

        Returns:
            True if sent successfully
        """
        listing_url = f"{self.frontend_url}/property_page?id={property_id}"
        title = html.escape(property_title)

        subject = f"New inquiry about {property_title}"
        html_content = _wrap_html(f"""
                <h1>New inquiry about {title}</h1>
                <p>A buyer on {settings.app_name} is interested in your listing.</p>
                <p><strong>Contact:</strong> {html.escape(sender_contact)}</p>
                <p class="message">{html.escape(message)}</p>
                <p style="margin: 30px 0;">
                    <a href="{listing_url}" class="button">View Listing</a>
                </p>
                <p class="footer">Reply to the buyer directly using the contact above.</p>
        """)

        return self._send_email(to_email, subject, html_content)


# Singleton instance
_email_service: Optional[EmailService] = None


def get_email_service() -> EmailService:
    """Get the email service singleton."""
    global _email_service
    if _email_service is None:
        _email_service = EmailService()
    return _email_service
