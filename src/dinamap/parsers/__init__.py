"""Dinamap block record reading and field decoding."""
