"""Crypto course landing site with a live exchange-rate refresh endpoint."""
