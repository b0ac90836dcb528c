# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/__main__.py

import sys

from .cli import main

sys.exit(main())
