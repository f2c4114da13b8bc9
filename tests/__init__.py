"""Test suite for TokenPulse."""
