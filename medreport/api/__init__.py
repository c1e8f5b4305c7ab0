"""API modules for medreport."""
