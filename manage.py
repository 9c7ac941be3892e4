#!/usr/bin/env python
"""Command-line entry point for the Strength of Faculty project."""
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# .env at the project root wins over one found further up the tree
ENV_FILE = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=ENV_FILE if ENV_FILE.exists() else find_dotenv())


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "sof_project.settings")
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Install the project with `pip install -e .` "
            "inside an activated virtual environment."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == "__main__":
    main()
