"""DOST-MIMAROPA program-management portal desktop client."""

__version__ = "0.3.0"
