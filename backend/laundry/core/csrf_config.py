"""
CSRF protection instance.

Initialized in create_app(). The JSON blueprints authenticate with bearer
tokens and are exempted there with ``csrf.exempt(blueprint)``.
"""

from flask_wtf.csrf import CSRFProtect

csrf = CSRFProtect()
