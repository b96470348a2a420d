"""
CLI command modules.
"""

from servicecall_cli.commands import request

__all__ = ["request"]
