from flask_talisman import Talisman

def init_security(app):
    """
    Board headers for staging/production: HTTPS, HSTS and a same-origin CSP.
    The board page loads only static/js/board.js and static/css/board.css.
    """
    csp = {
        "default-src": ["'self'"],
        # emoji picker is static/js/board.js; templates carry no inline script
        "script-src":  ["'self'"],
        # board.css only, templates use classes instead of style attributes
        "style-src":   ["'self'"],
        "img-src":     ["'self'", "data:"],
        "font-src":    ["'self'", "data:"],
        "frame-ancestors": ["'self'"],
        "base-uri":    ["'self'"],
        "form-action": ["'self'"],
    }

    Talisman(
        app,
        content_security_policy=csp,
        force_https=True,
        strict_transport_security=True,
        session_cookie_secure=True,
        frame_options="SAMEORIGIN",
        referrer_policy="strict-origin-when-cross-origin",
    )
