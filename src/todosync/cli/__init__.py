"""Command-line interface for todosync."""

from __future__ import annotations

import asyncio
import logging as logging

from todosync import ConfigError as ConfigError
from todosync import TodoSync as TodoSync
from todosync import TodoSyncConfig as TodoSyncConfig
from todosync import load_config as load_config
from todosync import write_config as write_config
from todosync.cli.app import main as main
from todosync.cli.commands import init as init_command
from todosync.cli.commands import properties as properties_command
from todosync.cli.commands import pull as pull_command
from todosync.cli.commands import push as push_command
from todosync.cli.parser import build_parser as build_parser

_run_init = init_command.run_init
_run_push = push_command.run_push
_run_pull = pull_command.run_pull
_run_properties = properties_command.run_properties

__all__ = ["asyncio", "build_parser", "main"]
