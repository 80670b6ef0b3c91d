"""Parsing utilities for arch-test."""

from parse.go_imports import parse_file, parse_source

__all__ = ["parse_file", "parse_source"]
