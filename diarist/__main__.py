#!/usr/bin/env python3
"""
Run the diarist CLI with ``python -m diarist``.
"""
from diarist.cli import main

if __name__ == "__main__":
    main()
