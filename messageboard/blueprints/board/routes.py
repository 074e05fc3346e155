from flask import current_app, redirect, render_template, request, url_for

from messageboard.extensions import db
from messageboard.security import BoardSession
from messageboard.services.messages import (
    RequestMeta,
    SubmittedMessage,
    list_messages,
    parse_page,
    submit_message,
)
from messageboard.services.schema import ensure_schema
from . import bp

NOTICE_POSTED = "Your message was posted successfully! 🎉"

EMOJIS = [
    "😀", "😂", "😍", "😉", "🤔", "👍", "🔥", "🎉", "🚀", "🙏", "😅", "😎",
    "🤖", "💡", "✅", "❌", "❤️", "✨", "☕️", "📌", "📎", "🛠️", "🧠",
]


@bp.before_request
def _bootstrap_schema():
    # Idempotent; store failures surface through the SQLAlchemyError handler
    ensure_schema(db.engine)


def _render_board(board_session: BoardSession, errors=None, form_values=None):
    settings = current_app.extensions["messageboard"]
    page = list_messages(
        db.session,
        page=parse_page(request.args.get("page")),
        per_page=settings.page_size,
    )
    notice = NOTICE_POSTED if "posted" in request.args else None
    return render_template(
        "board.html",
        page=page,
        errors=errors or [],
        notice=notice,
        form=form_values or {},
        csrf_token=board_session.csrf_token,
        emojis=EMOJIS,
    )


@bp.get("/")
def index():
    return _render_board(BoardSession())


@bp.post("/")
def post_message():
    """Post/Redirect/Get: success redirects, failure re-renders with errors (200)."""
    board_session = BoardSession()
    submitted = SubmittedMessage.from_form(request.form)
    result = submit_message(
        db.session, submitted, board_session, RequestMeta.from_request(request)
    )
    if result.ok:
        return redirect(url_for("board.index", posted=1), code=303)
    return _render_board(
        board_session,
        errors=result.errors,
        form_values=submitted.redisplay_values(),
    )
