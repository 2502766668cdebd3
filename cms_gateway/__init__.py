"""Multi-tenant content API gateway."""
