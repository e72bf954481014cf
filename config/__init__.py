"""Top-level package for Django configuration.

This package holds the settings modules of the facility scheduling service
and the entry points for WSGI, ASGI and the Celery worker.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
