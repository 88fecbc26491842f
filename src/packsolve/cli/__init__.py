"""packsolve command-line interface."""
