"""Bounded contexts of folio."""
