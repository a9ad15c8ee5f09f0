#!/usr/bin/env python
"""
Command line entry point for the healthdesk backend.

Points Django at ``healthdesk.settings`` (unless DJANGO_SETTINGS_MODULE
is already set) and hands over to the management utility, e.g.
``python manage.py migrate`` or ``python manage.py seed_directory``.
"""
import os
import sys


def main() -> None:
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'healthdesk.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Django is not importable. Install the project with "
            "`pip install -e .` inside an active virtual environment."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
