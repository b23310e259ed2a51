"""Time-indexed model of the Holland Tunnel bike-lane schedule."""
