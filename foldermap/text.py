"""Plain text extraction from stored message files."""

import email
import email.message
import html
import re
from email.header import decode_header
from pathlib import Path

_SCRIPT_STYLE_RE = re.compile(r'<(script|style)\b.*?</\1\s*>', re.IGNORECASE | re.DOTALL)
_HTML_TAG_RE = re.compile(r'<[^>]+>')
_MULTI_SPACE_RE = re.compile(r'[ \t]+')
_MULTI_NEWLINE_RE = re.compile(r'\n\s*\n\s*\n+')


def decode_mime_header(header: str | None) -> str:
    """Decode a MIME-encoded email header."""
    if header is None:
        return ""
    decoded_parts = decode_header(header)
    result = []
    for part, charset in decoded_parts:
        if isinstance(part, bytes):
            result.append(part.decode(charset or "utf-8", errors="replace"))
        else:
            result.append(part)
    return "".join(result)


def html_to_text(body: str) -> str:
    """Strip tags and decode entities from an HTML body."""
    text = _SCRIPT_STYLE_RE.sub(' ', body)
    text = _HTML_TAG_RE.sub(' ', text)
    text = html.unescape(text)
    text = _MULTI_SPACE_RE.sub(' ', text)
    text = _MULTI_NEWLINE_RE.sub('\n\n', text)
    return text.strip()


def _decode_part(part: email.message.Message) -> str | None:
    payload = part.get_payload(decode=True)
    if not isinstance(payload, bytes):
        return None
    charset = part.get_content_charset() or "utf-8"
    try:
        return payload.decode(charset, errors="replace")
    except LookupError:
        # Unknown charset name
        return payload.decode("utf-8", errors="replace")


def extract_body(msg: email.message.Message) -> str:
    """Extract the body of a message as plain text.

    Inline text/plain parts are preferred; HTML parts are converted to text
    when no plain part exists. Attachments are ignored.
    """
    for content_type in ("text/plain", "text/html"):
        for part in msg.walk():
            if part.is_multipart() or part.get_content_type() != content_type:
                continue
            if "attachment" in part.get("Content-Disposition", ""):
                continue
            text = _decode_part(part)
            if text is None:
                continue
            return html_to_text(text) if content_type == "text/html" else text
    return ""


def extract_full_text(path: str | Path) -> str:
    """Read a raw RFC822 message file and return its body text.

    Raises:
        FileNotFoundError: If the message file does not exist
    """
    raw = Path(path).read_bytes()
    msg = email.message_from_bytes(raw)
    return extract_body(msg)
