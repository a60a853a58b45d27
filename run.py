#!/usr/bin/env python3
"""Convenience runner for the Strava ride map.

Usage:
    python run.py serve
    python run.py fetch --start 2024-09-02 --end 2024-09-15
"""
import logging
from ride_map.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    raise SystemExit(main())
