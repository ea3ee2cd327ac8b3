"""
Test helper utilities for dinamap testing.

This module provides reusable utilities for:
- Building synthetic block records
- Packing waveform samples the way the device does
"""
