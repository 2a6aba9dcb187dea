"""Sale record ingestion.

This package coerces raw rows from the document store and uploaded
spreadsheets into canonical records and writes uploads back in batches.
"""
