"""Training data generation layer.

This module turns annotated documents into per-label labeled points and
persists them as reloadable columnar datasets for model fitting.
"""
