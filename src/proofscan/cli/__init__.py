"""ProofScan command-line interface."""
