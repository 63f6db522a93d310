"""Read an .eml data URI into plain text for analysis."""

from __future__ import annotations

from email import policy
from email.errors import MessageError
from email.message import Message
from email.parser import BytesParser
from html.parser import HTMLParser

from phish_content_analyzer.core.errors import MalformedPayloadError
from phish_content_analyzer.domain.data_uri import parse_data_uri

_RENDERED_HEADERS = ("From", "To", "Cc", "Reply-To", "Return-Path", "Date", "Subject")


class _HtmlTextCollector(HTMLParser):
    """Collect visible text; anchors render as `text (href)` so link targets survive."""

    def __init__(self) -> None:
        super().__init__()
        self.chunks: list[str] = []
        self._current_href: str | None = None
        self._anchor_text: list[str] = []
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        name = tag.lower()
        if name in {"script", "style"}:
            self._skip_depth += 1
            return
        if name == "a":
            attrs_map = {key.lower(): value for key, value in attrs}
            href = (attrs_map.get("href") or "").strip()
            self._current_href = href or None
            self._anchor_text = []
        elif name in {"br", "p", "div", "tr", "li"}:
            self.chunks.append("\n")

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        if self._current_href is not None:
            self._anchor_text.append(data)
        else:
            self.chunks.append(data)

    def handle_endtag(self, tag: str) -> None:
        name = tag.lower()
        if name in {"script", "style"}:
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if name != "a" or self._current_href is None:
            return
        text = " ".join("".join(self._anchor_text).split())
        if text and text != self._current_href:
            self.chunks.append(f"{text} ({self._current_href})")
        else:
            self.chunks.append(self._current_href)
        self._current_href = None
        self._anchor_text = []


def html_to_text(html: str) -> str:
    collector = _HtmlTextCollector()
    collector.feed(html or "")
    collector.close()
    lines = (" ".join(line.split()) for line in "".join(collector.chunks).splitlines())
    return "\n".join(line for line in lines if line)


def _decode_part(part: Message) -> str:
    payload = part.get_payload(decode=True)
    if payload is None:
        return ""
    charset = part.get_content_charset() or "utf-8"
    for name in (charset, "utf-8", "latin-1"):
        try:
            return payload.decode(name, errors="replace")
        except LookupError:
            continue
    return ""


def _extract_body_parts(message: Message) -> tuple[str, str, list[str]]:
    body_text: list[str] = []
    body_html: list[str] = []
    attachments: list[str] = []
    parts = message.walk() if message.is_multipart() else [message]

    for part in parts:
        if part.get_content_maintype() == "multipart":
            continue
        filename = part.get_filename()
        content_disposition = (part.get("Content-Disposition") or "").lower()
        if filename or "attachment" in content_disposition:
            if filename:
                attachments.append(" ".join(filename.split()))
            continue
        content_type = (part.get_content_type() or "").lower()
        content = _decode_part(part)
        if not content.strip():
            continue
        if content_type == "text/plain":
            body_text.append(content.strip())
        elif content_type == "text/html":
            body_html.append(content)
    return "\n".join(body_text), "\n".join(body_html), list(dict.fromkeys(attachments))


def render_message(raw: bytes) -> str:
    """Render headers, body and attachment names of an RFC 822 message as text."""

    try:
        message = BytesParser(policy=policy.default).parsebytes(raw)
    except (MessageError, ValueError) as exc:
        raise MalformedPayloadError(f"Failed to read .eml file: {exc}") from exc

    lines: list[str] = []
    for name in _RENDERED_HEADERS:
        value = message.get(name)
        if value:
            lines.append(f"{name}: {' '.join(str(value).split())}")

    body_text, body_html, attachments = _extract_body_parts(message)
    body = body_text or html_to_text(body_html)
    if body_text and body_html:
        # Links hidden behind anchor text only show up in the HTML alternative.
        html_links = [line for line in html_to_text(body_html).splitlines() if "(http" in line]
        if html_links:
            body = body + "\n" + "\n".join(html_links)
    if lines and body:
        lines.append("")
    if body:
        lines.append(body)
    if attachments:
        lines.append(f"Attachments: {', '.join(attachments)}")
    return "\n".join(lines).strip()


def read_container(email_data_uri: str) -> str:
    """Turn an .eml data URI into plain text.

    Invalid data URIs and unreadable payloads raise `MalformedPayloadError`.
    """

    payload = parse_data_uri(email_data_uri, label=".eml file")
    text = render_message(payload.data)
    if not text:
        raise MalformedPayloadError("Failed to read .eml file: no readable content.")
    return text
