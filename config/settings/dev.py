"""Development settings for the facility scheduling service.

This module extends the base settings with development specific
configuration: debug mode, open hosts, a local sqlite database and the
console email backend, so the weekly summary is printed instead of sent.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'

# Plain static storage, the manifest is only built by collectstatic
STORAGES = {
    **STORAGES,  # noqa: F405
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

# Run Celery tasks inline when no broker is configured
CELERY_TASK_ALWAYS_EAGER = os.environ.get('CELERY_TASK_ALWAYS_EAGER', 'true').lower() == 'true'  # noqa: F405
