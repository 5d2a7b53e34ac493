#!/usr/bin/env python3
"""Convenience runner for the Strava gear fixer.

Usage:
    python run.py [--data-file data.json]
"""
from strava_gear_fix.main import main

if __name__ == "__main__":
    raise SystemExit(main())
