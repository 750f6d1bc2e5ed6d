#!/usr/bin/env python3
"""
Personal Context Hub

Keyword search over saved captures and AI answers grounded in them,
using whichever hosted provider has a key configured.
"""

from context_hub.cli.main import main

if __name__ == "__main__":
    main()
