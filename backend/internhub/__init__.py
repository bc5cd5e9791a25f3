"""InternHub: intern management service."""
