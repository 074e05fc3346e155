from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Protocol

from flask import current_app
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from messageboard.models.message import Message
from messageboard.utils.validators import (
    COMMENT_MAX_LENGTH,
    EMAIL_MAX_LENGTH,
    IP_MAX_LENGTH,
    NAME_MAX_LENGTH,
    TOPIC_MAX_LENGTH,
    USER_AGENT_MAX_LENGTH,
    WEBSITE_MAX_LENGTH,
    clean_text,
    has_min_length,
    normalize_email,
    normalize_website,
    truncate,
)

ERR_CSRF = "Security check failed. Please try again."
ERR_HONEYPOT = "Spam protection triggered."
ERR_NAME = "Please enter your name (at least 2 characters)."
ERR_TOPIC = "Please enter a topic (at least 2 characters)."
ERR_COMMENT = "Please write a comment (at least 2 characters)."
ERR_NAME_LONG = f"Name is too long (max {NAME_MAX_LENGTH} characters)."
ERR_TOPIC_LONG = f"Topic is too long (max {TOPIC_MAX_LENGTH} characters)."
ERR_COMMENT_LONG = f"Comment is too long (max {COMMENT_MAX_LENGTH} characters)."
ERR_EMAIL_LONG = "Email is too long."
ERR_WEBSITE_LONG = "Website URL is too long."

FORM_FIELDS = ("name", "email", "website", "topic", "comment", "nickname", "csrf_token")


class CsrfContext(Protocol):
    def check_csrf(self, submitted: Optional[str]) -> bool: ...


@dataclass(frozen=True)
class SubmittedMessage:
    """Raw form values exactly as posted."""

    name: str = ""
    email: str = ""
    website: str = ""
    topic: str = ""
    comment: str = ""
    nickname: str = ""  # honeypot, humans never see it
    csrf_token: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, str]) -> "SubmittedMessage":
        return cls(**{name: (form.get(name) or "") for name in FORM_FIELDS})

    def redisplay_values(self) -> dict:
        """Values echoed back into the form after a rejected post."""
        return {
            "name": self.name,
            "email": self.email,
            "website": self.website,
            "topic": self.topic,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class RequestMeta:
    ip: Optional[str] = None
    user_agent: Optional[str] = None

    @classmethod
    def from_request(cls, request) -> "RequestMeta":
        return cls(ip=request.remote_addr, user_agent=request.headers.get("User-Agent"))


@dataclass
class SubmissionResult:
    message: Optional[Message] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.message is not None and not self.errors


@dataclass(frozen=True)
class Page:
    items: List
    total: int
    page: int
    per_page: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def total_pages(self) -> int:
        # An empty board still has one (empty) page
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def pages(self) -> range:
        return range(1, self.total_pages + 1)


def validate_submission(form: SubmittedMessage, board_session: CsrfContext):
    """
    Run every check and collect all failures, not just the first.

    Returns (cleaned, errors): cleaned holds the normalized column values
    for a Message; errors is the ordered list of user-facing strings.
    """
    errors: List[str] = []

    if not board_session.check_csrf(form.csrf_token):
        errors.append(ERR_CSRF)
    if form.nickname != "":
        errors.append(ERR_HONEYPOT)

    name = clean_text(form.name)
    topic = clean_text(form.topic)
    comment = clean_text(form.comment)
    email = normalize_email(form.email)
    website = normalize_website(form.website)

    if not has_min_length(name):
        errors.append(ERR_NAME)
    elif len(name) > NAME_MAX_LENGTH:
        errors.append(ERR_NAME_LONG)
    if not has_min_length(topic):
        errors.append(ERR_TOPIC)
    elif len(topic) > TOPIC_MAX_LENGTH:
        errors.append(ERR_TOPIC_LONG)
    if not has_min_length(comment):
        errors.append(ERR_COMMENT)
    elif len(comment) > COMMENT_MAX_LENGTH:
        errors.append(ERR_COMMENT_LONG)
    if email is not None and len(email) > EMAIL_MAX_LENGTH:
        errors.append(ERR_EMAIL_LONG)
    if website is not None and len(website) > WEBSITE_MAX_LENGTH:
        errors.append(ERR_WEBSITE_LONG)

    cleaned = {
        "name": name,
        "email": email,
        "website": website,
        "topic": topic,
        "comment": comment,
    }
    return cleaned, errors


def submit_message(
    session: Session,
    form: SubmittedMessage,
    board_session: CsrfContext,
    meta: RequestMeta,
) -> SubmissionResult:
    """Validate a posted message and store it; nothing is written on any error."""
    cleaned, errors = validate_submission(form, board_session)
    if errors:
        # Structured log (no field contents to avoid PII)
        current_app.logger.info(
            "message_rejected",
            extra={
                "event": "message_rejected",
                "error_count": len(errors),
                "csrf_failed": ERR_CSRF in errors,
                "honeypot": ERR_HONEYPOT in errors,
            },
        )
        return SubmissionResult(errors=errors)

    msg = Message(
        **cleaned,
        ip=truncate(meta.ip, IP_MAX_LENGTH),
        user_agent=truncate(meta.user_agent, USER_AGENT_MAX_LENGTH),
    )
    session.add(msg)
    session.commit()

    current_app.logger.info(
        "message_posted",
        extra={"event": "message_posted", "message_id": msg.id},
    )
    return SubmissionResult(message=msg)


def parse_page(value) -> int:
    """Query value to a 1-based page number; junk and values below 1 become 1."""
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(1, page)


def count_messages(session: Session) -> int:
    return session.query(func.count(Message.id)).scalar() or 0


def list_messages(session: Session, *, page: int = 1, per_page: int = 10) -> Page:
    """
    One page of messages, newest first; id breaks created_at ties.
    A page past the end comes back empty with the real page count.
    """
    page = max(1, int(page))
    total = count_messages(session)
    if (page - 1) * per_page >= total:
        # Past the end: skip the SELECT, huge offsets overflow the store's integers
        return Page(items=[], total=total, page=page, per_page=per_page)
    items = (
        session.query(Message)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(per_page)
        .offset((page - 1) * per_page)
        .all()
    )
    return Page(items=items, total=total, page=page, per_page=per_page)
