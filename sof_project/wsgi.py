"""
WSGI config for the Strength of Faculty project.
"""
import os
from pathlib import Path

from django.core.wsgi import get_wsgi_application
from dotenv import load_dotenv, find_dotenv

env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path if env_path.exists() else find_dotenv())

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sof_project.settings")

application = get_wsgi_application()
