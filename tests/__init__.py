"""Unit tests for the chat translator.

This package contains test modules for all components of the chat translator.
Tests use pytest with asyncio support and replace HTTP calls with fake sessions via monkeypatch.
"""
