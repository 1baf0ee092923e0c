# storefront/domain/errors.py
"""
Wyjatki domenowe. Routery mapuja je na kody HTTP,
serwisy i repo rzucaja je zamiast HTTPException.
"""


class NotFoundError(ValueError):
    """Koszyk, produkt, user albo feedback nie istnieje."""


class ValidationError(ValueError):
    """Dane nie przeszly walidacji; `errors` to lista {field, message}."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in self.errors))


class InsufficientStockError(ValueError):
    pass


class EmptyCartError(ValueError):
    pass


class ConflictError(RuntimeError):
    """Optimistic locking - ktos inny zmienil koszyk w miedzyczasie."""
