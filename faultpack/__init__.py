"""FaultPack internals for FaultKit."""
