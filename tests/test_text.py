"""Tests for message text extraction."""

import email
from email.message import EmailMessage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import pytest

from foldermap.text import decode_mime_header, extract_body, extract_full_text, html_to_text


class TestDecodeMimeHeader:
    def test_plain(self):
        assert decode_mime_header("Simple Subject") == "Simple Subject"

    def test_none(self):
        assert decode_mime_header(None) == ""

    def test_encoded(self):
        assert decode_mime_header("Re: =?UTF-8?B?SGVsbG8=?= World") == "Re: Hello World"


class TestHtmlToText:
    def test_strips_tags_and_entities(self):
        html = "<html><body><p>Hello&nbsp;<b>world</b> &amp; friends</p></body></html>"
        assert html_to_text(html) == "Hello\xa0 world & friends"

    def test_drops_scripts_and_styles(self):
        html = "<style>p { color: red }</style><p>Visible</p><script>var x = 1;</script>"
        assert html_to_text(html) == "Visible"


class TestExtractBody:
    def test_plain_text(self):
        msg = MIMEText("This is the body text.", "plain", "utf-8")
        assert extract_body(msg) == "This is the body text."

    def test_prefers_plain_over_html(self):
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText("<p>HTML version</p>", "html"))
        msg.attach(MIMEText("Plain version", "plain"))
        assert extract_body(msg) == "Plain version"

    def test_html_only(self):
        msg = MIMEMultipart("alternative")
        msg.attach(MIMEText("<p>Only <i>HTML</i></p>", "html"))
        assert extract_body(msg) == "Only HTML"

    def test_skips_attachments(self):
        msg = MIMEMultipart()
        attachment = MIMEText("attached notes", "plain")
        attachment.add_header("Content-Disposition", "attachment", filename="notes.txt")
        msg.attach(attachment)
        msg.attach(MIMEText("Inline body", "plain"))
        assert extract_body(msg) == "Inline body"

    def test_empty(self):
        msg = email.message_from_bytes(b"Content-Type: text/plain\r\n\r\n")
        assert extract_body(msg) == ""

    def test_unknown_charset(self):
        raw = b"Content-Type: text/plain; charset=x-unknown\r\n\r\nStill readable"
        msg = email.message_from_bytes(raw)
        assert extract_body(msg) == "Still readable"


class TestExtractFullText:
    def test_reads_file(self, temp_dir):
        msg = EmailMessage()
        msg["Subject"] = "Test"
        msg.set_content("Body from file")
        path = temp_dir / "message.eml"
        path.write_bytes(msg.as_bytes())
        assert extract_full_text(path).strip() == "Body from file"

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            extract_full_text(temp_dir / "missing.eml")
