"""Campus Board: topics, moderated comments and role-based administration."""

__version__ = "0.1.0"
