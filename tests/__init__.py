"""Tests - Test suite and shared test circuits."""
