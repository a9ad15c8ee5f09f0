"""Care application for the healthdesk backend.

This package contains the directory and booking models, the service
layer that enforces booking and search rules, serializers, views and
route registrations for the REST API.
"""
