"""Test suite for the chat core.

Unit tests live under unit/<area>/ as non-prefixed modules collected by
conftest.py; shared fakes live in helpers/.
"""
