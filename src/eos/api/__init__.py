"""HTTP transport for the EOS rules engine."""
