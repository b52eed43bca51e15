"""TestPlane - infers build and test targets from test-runner configuration."""

__version__ = "0.1.0"
