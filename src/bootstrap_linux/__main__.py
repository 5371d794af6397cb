# -*- coding: utf-8 -*-
# -----------------------------------------------------------------------------
# filename: __main__.py
# author: dunamismax
# version: 1.0.0
# date: 10-19-2026
# github: https://github.com/dunamismax
# description: Allows running the toolkit with ``python -m bootstrap_linux``.
# -----------------------------------------------------------------------------
from bootstrap_linux.cli import app
from bootstrap_linux.config import PROG_NAME

if __name__ == "__main__":
    app(prog_name=PROG_NAME)
