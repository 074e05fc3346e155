from .csrf import BoardSession
from .headers import init_security

__all__ = ["BoardSession", "init_security"]
