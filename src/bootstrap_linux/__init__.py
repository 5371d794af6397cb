# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: __init__.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Dry-run aware provisioning core for bootstrapping Linux installs.
# -----------------------------------------------------------------------------
from bootstrap_linux.config import ExecutionMode, RunConfig
from bootstrap_linux.errors import FatalError
from bootstrap_linux.logs import LogSink, Severity, multiline
from bootstrap_linux.runner import Command, CommandRunner
from bootstrap_linux.session import RunSession
from bootstrap_linux.tracking import FolderTracker, RemovalResult, TemporaryWorkspace

APP_NAME = "Linux Bootstrap"
VERSION = "1.0.0"

__all__ = [
    "APP_NAME",
    "VERSION",
    "Command",
    "CommandRunner",
    "ExecutionMode",
    "FatalError",
    "FolderTracker",
    "LogSink",
    "RemovalResult",
    "RunConfig",
    "RunSession",
    "Severity",
    "TemporaryWorkspace",
    "multiline",
]
