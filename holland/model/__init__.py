"""Pure, time-indexed model of both bores, their fleets and escorts."""
