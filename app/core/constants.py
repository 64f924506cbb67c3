"""Application constants."""

# Workout stats: label used when a workout has no subtype
OTHER_SUBTYPE_LABEL = "Other"

# Auth header scheme
BEARER_SCHEME = "bearer"
