"""Schema validation, reporting and configuration helpers for Kubernetes manifests."""

__version__ = "1.0.0"