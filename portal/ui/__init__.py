"""CustomTkinter desktop interface."""
