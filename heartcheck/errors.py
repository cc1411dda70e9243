# -*- coding: utf-8 -*-
"""Request-level failures.

Row-level problems never raise: they fall back to defaults. These exceptions
are the only ways an import or store call can fail, and the HTTP layer maps
each one to a status code.
"""

from __future__ import annotations


class HeartCheckError(Exception):
    status_code = 500


class ImportInputError(HeartCheckError):
    """Neither a spreadsheet URL nor records to calculate were given."""
    status_code = 400


class SpreadsheetFetchError(HeartCheckError):
    status_code = 502


class SpreadsheetParseError(HeartCheckError):
    status_code = 422


class AssessmentNotFoundError(HeartCheckError):
    status_code = 404
