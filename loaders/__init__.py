"""Workbook loaders."""
