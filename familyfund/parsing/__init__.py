"""Parsers for payment messages submitted as proof."""
