from messageboard.extensions import db
from messageboard.models import Message
from messageboard.services import messages as svc
from messageboard.services.messages import RequestMeta, SubmittedMessage, submit_message, validate_submission

class DummyBoardSession:
    def __init__(self, ok=True): self.ok, self.seen = ok, []
    def check_csrf(self, submitted):
        self.seen.append(submitted)
        return self.ok

def _form(**overrides):
    values = dict(
        name="  Ada  ",
        email=" ada@example.com ",
        website="example.com",
        topic=" Hello ",
        comment=" First post!\nWith a second line. ",
        nickname="",
        csrf_token="tok",
    )
    values.update(overrides)
    return SubmittedMessage(**values)

def test_from_form_fills_missing_fields_with_empty_strings():
    form = SubmittedMessage.from_form({"name": "Ada", "comment": None})
    assert form.name == "Ada"
    assert form.comment == ""
    assert form.nickname == ""
    assert form.csrf_token == ""

def test_valid_submission_is_normalized():
    cleaned, errors = validate_submission(_form(), DummyBoardSession())
    assert errors == []
    assert cleaned == {
        "name": "Ada",
        "email": "ada@example.com",
        "website": "http://example.com",
        "topic": "Hello",
        "comment": "First post!\nWith a second line.",
    }

def test_all_errors_are_collected_in_order():
    form = _form(name=" a ", topic="", comment="x", nickname="bot", csrf_token="")
    _, errors = validate_submission(form, DummyBoardSession(ok=False))
    assert errors == [
        svc.ERR_CSRF,
        svc.ERR_HONEYPOT,
        svc.ERR_NAME,
        svc.ERR_TOPIC,
        svc.ERR_COMMENT,
    ]

def test_invalid_optional_fields_are_dropped_without_error():
    cleaned, errors = validate_submission(
        _form(email="nope", website="not a url"), DummyBoardSession()
    )
    assert errors == []
    assert cleaned["email"] is None
    assert cleaned["website"] is None

def test_overlong_fields_are_rejected():
    long_email = "a" * 250 + "@example.com"
    long_site = "https://example.com/" + "p" * 250
    form = _form(
        name="n" * 101,
        topic="t" * 201,
        comment="c" * 5001,
        email=long_email,
        website=long_site,
    )
    _, errors = validate_submission(form, DummyBoardSession())
    assert errors == [
        svc.ERR_NAME_LONG,
        svc.ERR_TOPIC_LONG,
        svc.ERR_COMMENT_LONG,
        svc.ERR_EMAIL_LONG,
        svc.ERR_WEBSITE_LONG,
    ]

def test_submit_persists_exactly_one_row(app):
    with app.test_request_context("/", method="POST"):
        meta = RequestMeta(ip="203.0.113.7", user_agent="U" * 400)
        result = submit_message(db.session, _form(), DummyBoardSession(), meta)
        assert result.ok
        assert result.errors == []

        rows = Message.query.all()
        assert len(rows) == 1
        row = rows[0]
        assert row.id == result.message.id
        assert row.name == "Ada"
        assert row.email == "ada@example.com"
        assert row.website == "http://example.com"
        assert row.topic == "Hello"
        assert row.comment == "First post!\nWith a second line."
        assert row.ip == "203.0.113.7"
        assert row.user_agent == "U" * 250
        assert row.created_at is not None

def test_submit_without_user_agent_stores_null(app):
    with app.test_request_context("/", method="POST"):
        result = submit_message(db.session, _form(), DummyBoardSession(), RequestMeta())
        assert result.ok
        assert result.message.user_agent is None
        assert result.message.ip is None

def test_honeypot_blocks_insert_even_when_everything_else_is_valid(app):
    with app.test_request_context("/", method="POST"):
        result = submit_message(db.session, _form(nickname="x"), DummyBoardSession(), RequestMeta())
        assert not result.ok
        assert result.errors == [svc.ERR_HONEYPOT]
        assert Message.query.count() == 0

def test_csrf_mismatch_blocks_insert(app):
    board_session = DummyBoardSession(ok=False)
    with app.test_request_context("/", method="POST"):
        result = submit_message(db.session, _form(csrf_token="forged"), board_session, RequestMeta())
        assert result.errors == [svc.ERR_CSRF]
        assert board_session.seen == ["forged"]
        assert Message.query.count() == 0
