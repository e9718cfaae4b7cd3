"""Adapters de servicios externos: email, identidad de Google, retry."""
