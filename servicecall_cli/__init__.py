"""
servicecall CLI

Command-line interface for one-off service calls.

Usage:
    python -m servicecall_cli request GET https://api.example.com/users
    python -m servicecall_cli request POST /users --base-url https://api.example.com --data '{"name": "Ada"}'
    python -m servicecall_cli request GET /users --replay calls.json
    python -m servicecall_cli config --init
"""

__version__ = "0.1.0"
