"""Exceptions raised by the solver core."""

from __future__ import annotations


class SolverError(Exception):
    """Base class for every error raised by the solver."""


class InvalidInput(SolverError, ValueError):
    """Bad words, dictionaries, patterns or settings.

    Raised when a solver or session is built, never mid-session for
    well-formed input.
    """


class CollaboratorError(SolverError):
    """The feedback source could not answer a guess.

    The elimination loop turns this into an ``aborted`` session instead of
    retrying.
    """
