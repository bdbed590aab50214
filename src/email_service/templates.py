import html
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from src.rsvps.dtos import Category, RSVPRecord


class PartyConfig(Protocol):
    party_name: str
    party_date: str
    party_time: str
    party_address: str
    street_parking: str
    contact_email: str


@dataclass(frozen=True)
class PartyDetails:
    name: str
    date: str
    time: str
    address: str
    street_parking: str
    contact_email: str

    @classmethod
    def from_config(cls, config: PartyConfig) -> "PartyDetails":
        return cls(
            name=config.party_name,
            date=config.party_date,
            time=config.party_time,
            address=config.party_address,
            street_parking=config.street_parking,
            contact_email=config.contact_email,
        )


def format_bringing_items(record: RSVPRecord) -> str:
    """Render the items a guest brings as an indented text block, or ``None``."""
    lines = []
    for category in Category:
        items = record.bringing_items.items_for(category)
        if items:
            lines.append(f"{category.label}:")
            lines.extend(f"  • {item}" for item in items)
    return "\n".join(lines) if lines else "None"


def format_submission_time(timestamp_ms: int) -> str:
    submitted = datetime.fromtimestamp(timestamp_ms / 1000, UTC)
    return submitted.strftime("%m/%d/%Y, %I:%M:%S %p UTC")


def template_params(record: RSVPRecord, party: PartyDetails, to_email: str, subject: str) -> dict:
    """Flat variable mapping shared by every relay template."""
    return {
        "to_email": to_email,
        "from_name": party.name,
        "subject": subject,
        "guest_name": record.name,
        "guest_email": record.email,
        "attending_status": "Yes" if record.attending else "No",
        "guest_count": record.guest_count,
        "dietary_restrictions": record.dietary_restrictions or "None",
        "bringing_items": format_bringing_items(record),
        "party_date": party.date,
        "party_time": party.time,
        "party_address": party.address,
        "street_parking": party.street_parking,
        "contact_email": party.contact_email,
        "submission_time": format_submission_time(record.timestamp),
    }


@dataclass
class EmailTemplates:
    NOTIFICATION_SUBJECT = "New RSVP from {guest_name} - {party_name}"
    CONFIRMATION_SUBJECT = "RSVP Confirmation - {party_name}"
    REMINDER_SUBJECT = "Party Reminder - {party_name}"

    REMINDER_TEXT = """Dear {guest_name},

This is a friendly reminder about our magical {party_name} celebration! We're excited to see you there.

Your RSVP Details:
• Attending: {attending_status}
• Number of Guests: {guest_count}
• Dietary Restrictions: {dietary_restrictions}
• Items You're Bringing:
{bringing_items}
• Original RSVP: {submission_time}

Party Information:
• Date: {party_date}
• Time: {party_time}
• Location: {party_address}
• Parking: {street_parking}

Important Reminders:
• Please arrive in costume! Magical theme optional
• We'll have plenty of magical treats and beverages
• If you need to make any changes to your RSVP, please contact us as soon as possible

We can't wait to celebrate with you!
Mischief Managed!

{party_name}
Questions? Contact us at {contact_email}"""

    REMINDER_HTML = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Party Reminder</title>
</head>
<body style="font-family: Georgia, serif; background-color: #f5f5f5; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: white; border: 2px solid #8B4513; border-radius: 10px; overflow: hidden;">
        <div style="background: linear-gradient(135deg, #8B4513, #A0522D); color: white; padding: 30px; text-align: center;">
            <h1 style="margin: 0; font-size: 28px;">Party Reminder</h1>
            <p>{party_name}</p>
        </div>

        <div style="padding: 30px;">
            <div style="margin-bottom: 25px; padding: 20px; background-color: #f9f9f9; border-left: 4px solid #8B4513;">
                <h2 style="color: #8B4513; margin-top: 0;">Dear {guest_name},</h2>
                <p>This is a friendly reminder about our magical {party_name} celebration! We're excited to see you there. Here's a quick recap of your RSVP details:</p>
            </div>

            <div style="margin-bottom: 25px; padding: 20px; background-color: #f9f9f9; border-left: 4px solid #8B4513;">
                <h2 style="color: #8B4513; margin-top: 0;">Your RSVP Details</h2>
                <p><strong>Attending:</strong> {attending_status}</p>
                <p><strong>Number of Guests:</strong> {guest_count}</p>
                <p><strong>Dietary Restrictions:</strong> {dietary_restrictions}</p>
                <p><strong>Items You're Bringing:</strong><br>
                    <span style="white-space: pre-line;">{bringing_items}</span></p>
                <p><strong>Original RSVP:</strong> {submission_time}</p>
            </div>

            <div style="margin-bottom: 25px; padding: 20px; background-color: #e8f4f8; border-left: 4px solid #4a90e2;">
                <h2 style="color: #4a90e2; margin-top: 0;">Party Information</h2>
                <p><strong>Date:</strong> {party_date}</p>
                <p><strong>Time:</strong> {party_time}</p>
                <p><strong>Location:</strong><br>{party_address}</p>
                <p><strong>Parking:</strong> {street_parking}</p>
            </div>

            <p style="text-align: center; font-size: 18px; color: #8B4513;">
                <strong>We can't wait to celebrate with you!</strong><br>
                <em>Mischief Managed!</em>
            </p>
        </div>

        <div style="background-color: #333; color: white; padding: 20px; text-align: center; font-size: 14px;">
            <p>{party_name}</p>
            <p>Questions? Contact us at {contact_email}</p>
        </div>
    </div>
</body>
</html>"""

    @classmethod
    def render_reminder(cls, record: RSVPRecord, party: PartyDetails) -> tuple[str, str, str]:
        """Return ``(subject, text_body, html_body)`` for a reminder."""
        subject = cls.REMINDER_SUBJECT.format(party_name=party.name)
        params = template_params(record, party, to_email=record.email, subject=subject)
        params["party_name"] = party.name
        text_body = cls.REMINDER_TEXT.format(**params)
        html_body = cls.REMINDER_HTML.format(
            **{key: html.escape(str(value)) for key, value in params.items()}
        )
        return subject, text_body, html_body
