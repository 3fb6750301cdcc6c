"""Command-line interface for fieldchain.

This package exposes RuleChain checks on record files and settings files
through the `fieldchain` command.
"""
