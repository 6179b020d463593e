"""Reflection: planning, focus-session and statistics core."""
