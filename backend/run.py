#!/usr/bin/env python3
"""
Entry point for running the Finance Tracker server.

Usage:
    python run.py [--port PORT] [--host HOST]
"""

from finance_tracker.cli import main


if __name__ == "__main__":
    main()
