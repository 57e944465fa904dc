import re
from typing import Optional
from .models import Contact, ContactKind
from .normalize import first_match, normalize_value


PHONE_PATTERN = re.compile(r"(\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4})(?:\s*x\s*(\d+))?", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

REDACTION_TOKEN = "[FILTERED]"

# Order matters: links before the bare address/number they contain
_REDACTIONS = (
    re.compile(r"mailto:\S+", re.IGNORECASE),
    re.compile(r"tel:\+?[\d\-().\s]*\d", re.IGNORECASE),
    EMAIL_PATTERN,
    re.compile(r"\d{10,}"),
    re.compile(r"\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}"),
)


def _phone(text: str) -> Optional[Contact]:
    match = PHONE_PATTERN.search(text)
    if not match:
        return None
    phone, extension = match.groups()
    value = f"{phone} x{extension}" if extension else phone
    return Contact(kind=ContactKind.PHONE, value=value)


def _email(text: str) -> Optional[Contact]:
    match = EMAIL_PATTERN.search(text)
    if not match:
        return None
    return Contact(kind=ContactKind.EMAIL, value=match.group(0))


def _opaque(text: str) -> Optional[Contact]:
    value = normalize_value(text)
    if value is None:
        return None
    return Contact(kind=ContactKind.TEXT, value=value)


CONTACT_MATCHERS = (_phone, _email, _opaque)


def extract_contact(text: Optional[str]) -> Optional[Contact]:
    """Classify contact text as a phone number, an email, or opaque text."""
    if text is None:
        return None
    return first_match(text, CONTACT_MATCHERS)


def resolve_contact(text: Optional[str], redact: bool = False) -> Optional[str]:
    """Contact value for a record. Redaction mode always yields None."""
    contact = extract_contact(text)
    if redact or contact is None:
        return None
    return contact.value


def redact(text):
    """Replace every email-like and phone-like substring with the redaction token."""
    if not text or not isinstance(text, str):
        return text
    for pattern in _REDACTIONS:
        text = pattern.sub(REDACTION_TOKEN, text)
    return text


def display_contact(value: Optional[str]) -> Optional[str]:
    """Human-readable form of a contact: "a@b.com" -> "a [at] b.com"."""
    if not value:
        return value
    return value.replace("@", " [at] ")
