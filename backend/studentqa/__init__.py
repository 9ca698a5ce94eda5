"""Answer storage and CRUD checks for the student Q&A homework application."""

__version__ = "0.1.0"
