"""HTTP surface exposing tile actions and command submission."""
