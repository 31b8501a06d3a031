"""Item model, launch descriptors and record validation."""
