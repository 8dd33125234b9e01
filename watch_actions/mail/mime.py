"""Turning a rendered Email into a wire message, per profile."""

from email.message import EmailMessage
from email.utils import format_datetime
from html.parser import HTMLParser
from typing import List, Optional

from watch_actions.domain.models import Profile

from .models import Email

EMAIL_ID_HEADER = "X-Watch-Email-Id"


class _TextExtractor(HTMLParser):
    def __init__(self):
        super().__init__(convert_charrefs=True)
        self.parts: List[str] = []
        self.skip = 0

    def handle_starttag(self, tag, attrs):
        if tag in ("script", "style"):
            self.skip += 1
        elif tag in ("br", "p", "div", "tr", "li"):
            self.parts.append("\n")

    def handle_endtag(self, tag):
        if tag in ("script", "style"):
            self.skip = max(0, self.skip - 1)

    def handle_data(self, data):
        if not self.skip:
            self.parts.append(data)


def html_to_text(body: str) -> str:
    """Plain-text rendition of an HTML body."""
    extractor = _TextExtractor()
    extractor.feed(body)
    extractor.close()
    lines = [line.strip() for line in "".join(extractor.parts).splitlines()]
    return "\n".join(line for line in lines if line)


def build_mime_message(email: Email, profile: Profile, sender: Optional[str] = None) -> EmailMessage:
    """Build the MIME message for ``email``.

    All profiles put text before html in multipart/alternative and attach
    files as multipart/mixed. OUTLOOK also sets the ``Importance`` header;
    GMAIL adds a text alternative to html-only emails.

    Args:
        email: Rendered email
        profile: Layout flavor
        sender: From header to use when the email has none
    """
    message = EmailMessage()

    if email.id:
        message[EMAIL_ID_HEADER] = email.id
    if email.from_:
        message["From"] = str(email.from_)
    elif sender:
        message["From"] = sender
    if email.to:
        message["To"] = str(email.to)
    if email.cc:
        message["Cc"] = str(email.cc)
    if email.reply_to:
        message["Reply-To"] = str(email.reply_to)
    if email.subject is not None:
        message["Subject"] = email.subject.replace("\n", " ").strip()
    if email.sent_date is not None:
        message["Date"] = format_datetime(email.sent_date)
    if email.priority is not None:
        message["X-Priority"] = email.priority.x_priority
        if profile == Profile.OUTLOOK:
            message["Importance"] = email.priority.importance

    text_body = email.text_body
    if text_body is None and email.html_body is not None and profile == Profile.GMAIL:
        text_body = html_to_text(email.html_body)

    if text_body is not None:
        message.set_content(text_body)
        if email.html_body is not None:
            message.add_alternative(email.html_body, subtype="html")
    elif email.html_body is not None:
        message.set_content(email.html_body, subtype="html")
    else:
        message.set_content("")

    for attachment in email.attachments.values():
        message.add_attachment(
            attachment.content,
            maintype=attachment.maintype,
            subtype=attachment.subtype,
            filename=attachment.filename,
        )

    return message
