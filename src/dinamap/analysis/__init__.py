"""Block stream decoding: waveform unpacking, status event detection and totals."""
