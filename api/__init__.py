"""HTTP surface of the clinical records service."""
