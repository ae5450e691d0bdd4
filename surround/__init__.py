"""Shower surround takeoff and estimate engine."""
