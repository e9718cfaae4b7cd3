"""Infrastructure Layer: adapters de persistencia, email, identidad externa."""
