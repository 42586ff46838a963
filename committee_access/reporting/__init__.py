"""Reporting utilities for committee_access."""

from .members import MEMBER_COLUMNS, export_members_csv, member_rows

__all__ = ["MEMBER_COLUMNS", "export_members_csv", "member_rows"]
