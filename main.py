#!/usr/bin/env python3
"""FocusPulse — entry point.

Run with:
    python main.py
    python -m focuspulse
"""

from focuspulse.__main__ import main


if __name__ == "__main__":
    main()
