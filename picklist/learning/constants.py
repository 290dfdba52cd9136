# Thresholds for learned list ordering. Changing any of these changes which
# history counts as evidence.

# Fewer completed trips than this and the shopping list keeps its own order.
LEARNING_MIN_TRIPS = 2

# Trips at the current store needed before they replace the global history.
LOCATION_OVERRIDE_MIN_TRIPS = 2

# Per-axis tolerance, in degrees, for two fingerprints to be the same store.
# Latitude and longitude are compared independently (a box, not a radius).
LOCATION_TOLERANCE_DEG = 0.001
