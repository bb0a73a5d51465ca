"""Shared helpers for excelgrid."""
