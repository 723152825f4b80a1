"""ProofScan - syntax-level discovery of Rust verification harnesses."""

__version__ = "0.1.0"
