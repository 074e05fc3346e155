from flask_wtf.csrf import generate_csrf, validate_csrf
from wtforms.validators import ValidationError


class BoardSession:
    """
    Per-visitor context handed to the submission pipeline.

    The CSRF token is created on first access and kept in the Flask session
    for its whole lifetime; Flask-WTF compares it with hmac.compare_digest.
    """

    def __init__(self, field_name: str = "csrf_token"):
        self.field_name = field_name

    @property
    def csrf_token(self) -> str:
        return generate_csrf(token_key=self.field_name)

    def check_csrf(self, submitted: str | None) -> bool:
        try:
            validate_csrf(submitted or "", token_key=self.field_name)
        except ValidationError:
            return False
        return True
