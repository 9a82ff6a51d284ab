"""Django project package for the marks dashboard."""
