"""adl - generate agent project scaffolding from ADL files."""

__version__ = "0.1.0"
