"""Module screens registered with the host shell."""
