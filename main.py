"""
Posture Guardian — Entry Point.

Single entry point: `python main.py` starts the reminder daemon.
Logging is configured by src.daemon.main() from LOG_LEVEL.
"""

from src.daemon import main

if __name__ == "__main__":
    main()
