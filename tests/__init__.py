"""
Test suite for the order signing protocol

Contains:
- tests/unit/          : Unit tests for individual modules
"""
