"""Single-tick agent actions against world objects."""
