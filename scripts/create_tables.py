#!/usr/bin/env python
"""Create the roles and users tables for the configured database."""

import logging
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from rolesapi.db import init_db

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
