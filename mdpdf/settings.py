"""
Standalone Django settings for the mdpdf command line tool.

Projects embedding mdpdf as an app use their own settings and may override
any MDPDF_* value listed in mdpdf.conf.DEFAULTS.
"""

import os


SECRET_KEY = os.environ.get('MDPDF_SECRET_KEY', 'mdpdf-standalone')

DEBUG = False

INSTALLED_APPS = [
    'mdpdf',
]

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {},
    },
]

USE_TZ = True

MDPDF_MARGIN_PX = int(os.environ.get('MDPDF_MARGIN_PX', '50'))
MDPDF_RENDERER = os.environ.get('MDPDF_RENDERER', 'chromium')
MDPDF_RENDER_TIMEOUT = float(os.environ.get('MDPDF_RENDER_TIMEOUT', '60'))
MDPDF_ALLOW_RAW_HTML = os.environ.get('MDPDF_ALLOW_RAW_HTML', '').lower() in ('1', 'true', 'yes')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'mdpdf': {
            'handlers': ['console'],
            'level': os.environ.get('MDPDF_LOG_LEVEL', 'WARNING'),
            'propagate': False,
        },
    },
}
