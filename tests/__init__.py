"""Tests for the HottoH integration."""
