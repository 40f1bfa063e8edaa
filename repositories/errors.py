"""
repositories/errors.py
----------------------
Errors raised by the repositories themselves. Driver errors
(psycopg2.Error and subclasses) are never wrapped and reach callers unchanged.
"""


class RepositoryError(Exception):
    """Base class for errors raised by the data-access layer."""


class InsertionError(RepositoryError):
    """An INSERT did not return the id of the new row."""


class InvalidCollectionOptionError(RepositoryError, ValueError):
    """A listing was asked for an unknown sort column/direction or a bad page window."""
