# utils/email.py
import logging
from typing import Dict

import requests

import config
from exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

# subject-independent bodies; {placeholders} come from template_data
TEMPLATES: Dict[str, str] = {
     "new_application": """
          <h2>New application for {property_title}</h2>
          <p>{tenant_name} applied to rent your property.</p>
          <p>{message}</p>
          <p><a href="{link}">Review the application</a></p>
     """,
     "application_accepted": """
          <h2>Your application was accepted</h2>
          <p>The owner of {property_title} accepted your application.</p>
          <p><a href="{link}">See your applications</a></p>
     """,
     "lease_signed": """
          <h2>Lease created for {property_title}</h2>
          <p>Start date: {start_date}. Monthly rent: {monthly_rent}.</p>
          <p><a href="{link}">Open the lease</a></p>
     """,
     "welcome_retroactive": """
          <h2>Welcome to {property_title}</h2>
          <p>Your {receipts_generated} receipts are ready.</p>
          <p>Take a minute to configure your services (energy, internet, insurance).</p>
          <p><a href="{link}">Open your receipts</a></p>
     """,
     "payment_declared": """
          <h2>Payment declared</h2>
          <p>{tenant_name} declares having paid {amount} for {period} ({property_title}).</p>
          <p><a href="{link}">Confirm the payment</a></p>
     """,
     "receipt_generated": """
          <h2>Your receipt for {period} is available</h2>
          <p>Amount: {amount} ({property_title}).</p>
          <p><a href="{link}">Download your receipt</a></p>
     """,
     "payment_reminder": """
          <h2>Rent reminder</h2>
          <p>The rent for {period} ({property_title}, {amount}) has not been recorded yet.</p>
          <p><a href="{link}">Declare your payment</a></p>
     """,
}


def render_template(template: str, template_data: dict) -> str:
     try:
          body = TEMPLATES[template]
     except KeyError:
          raise EmailDeliveryError(f"Unknown email template: {template}")
     return body.format(**template_data)


class BrevoEmailSender:
     """Email sink posting to the Brevo transactional API."""

     def __init__(self, api_key=None, api_url=None, timeout=None):
          self.api_key = api_key if api_key is not None else config.BREVO_API_KEY
          self.api_url = api_url or config.BREVO_API_URL
          self.timeout = timeout or config.EMAIL_TIMEOUT

     def send(self, to: str, subject: str, template: str, template_data: dict) -> None:
          if not self.api_key:
               raise EmailDeliveryError("BREVO_API_KEY is not set")

          response = requests.post(
               self.api_url,
               headers={
                    "api-key": self.api_key,
                    "Content-Type": "application/json",
               },
               json={
                    "sender": {
                         "name": config.EMAIL_SENDER_NAME,
                         "email": config.EMAIL_SENDER_ADDRESS,
                    },
                    "to": [{"email": to}],
                    "subject": subject,
                    "htmlContent": render_template(template, template_data),
               },
               timeout=self.timeout,
          )
          if response.status_code not in (200, 201, 202):
               raise EmailDeliveryError(f"Brevo error: {response.text}")
          logger.info("Email sent to %s: %s", to, subject)
