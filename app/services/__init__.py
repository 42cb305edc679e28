"""Services package for business logic."""
