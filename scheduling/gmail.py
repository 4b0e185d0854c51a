import base64
import logging
from email.mime.text import MIMEText

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

import config
from scheduling.errors import CollaboratorFailure

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.send"]


def _authorize():
    creds = service_account.Credentials.from_service_account_file(
        config.SERVICE_ACCOUNT_FILE,
        scopes=SCOPES,
        subject=config.GMAIL_SENDER,  # impersonated sender
    )
    return build("gmail", "v1", credentials=creds, cache_discovery=False)


def create_message(to: str, from_email: str, subject: str, body: str) -> dict:
    message = MIMEText(body, "plain")
    message["to"] = to
    message["from"] = from_email
    message["subject"] = subject
    raw = base64.urlsafe_b64encode(message.as_bytes()).decode()
    return {"raw": raw}


def send_notification(to: str, subject: str, body: str) -> dict:
    """
    Sends a plain text email through the Gmail API.

    Raises:
        CollaboratorFailure: email not configured or the API call failed.
    """
    if not config.SERVICE_ACCOUNT_FILE or not config.GMAIL_SENDER:
        raise CollaboratorFailure("Email configuration missing: SERVICE_ACCOUNT_FILE and GMAIL_SENDER required")

    message = create_message(to, config.GMAIL_SENDER, subject, body)
    try:
        service = _authorize()
        sent = service.users().messages().send(userId="me", body=message).execute()
    except (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError, ValueError) as e:
        raise CollaboratorFailure(f"Email sending failed: {e}")
    logger.info("Email sent to %s: %s", to, sent.get("id"))
    return sent
