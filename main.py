#!/usr/bin/env python3
"""
Main entry point for Lingxi2API server.
"""

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from lingxi2api.main import run  # noqa: E402

if __name__ == "__main__":
    run()
