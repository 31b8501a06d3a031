"""Diffing and placement: occupancy grids and the hotseat/workspace solvers."""
