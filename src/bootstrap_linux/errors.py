# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: errors.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Fatal error type shared by every bootstrap operation.
# -----------------------------------------------------------------------------


class FatalError(Exception):
    """
    Raised for conditions that must abort the whole run.

    Advisory failures (a command exiting non-zero) are never raised; they are
    returned as exit statuses and reported by the caller.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code
