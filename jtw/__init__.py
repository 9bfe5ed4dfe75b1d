"""AI-assisted Jira time logging."""

__version__ = "2.0.0"
