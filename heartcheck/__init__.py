# -*- coding: utf-8 -*-
"""Heart check: patient spreadsheet import, cardiovascular risk and heart age."""

__version__ = "1.0.0"
