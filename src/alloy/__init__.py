"""Alloy assembly and training orchestration.

This module parses rules and labels, merges fitted models with rules into
a gang ensemble, and packages everything into a named alloy.
"""
