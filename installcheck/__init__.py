"""installcheck — install-and-verify orchestration for published npm packages."""

__version__ = "0.1.0"
