"""Simulation services: climate, ecology, catastrophe and system utilities."""
