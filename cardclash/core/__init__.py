"""Engine primitives: records, configuration, events and the TU clock."""
