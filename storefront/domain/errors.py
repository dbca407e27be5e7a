"""Wyjatki domenowe storefrontu.

Kazdy wyjatek ma ``kind`` - staly, maszynowo czytelny identyfikator,
ktory routery przekazuja klientowi razem z komunikatem.
"""


class StorefrontError(Exception):
    """Bazowy wyjatek dla wszystkich bledow storefrontu."""

    kind = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class NotFoundError(StorefrontError):
    """Brak produktu, pozycji koszyka lub zamowienia."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} nie istnieje")


class ValidationError(StorefrontError):
    """Brakujace lub niepoprawne dane wejsciowe."""

    kind = "validation_error"

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = list(fields or [])
        super().__init__(message)

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["fields"] = self.fields
        return data


class EmptyCartError(StorefrontError):
    kind = "empty_cart"

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("Nie mozna zlozyc zamowienia - koszyk jest pusty")


class InvalidTransitionError(StorefrontError):
    """Nieznany kod statusu albo przejscie niedozwolone z biezacego statusu."""

    kind = "invalid_transition"


class CheckoutError(StorefrontError):
    """Blad zapisu podczas checkoutu. Przyczyna jest w ``__cause__`` i w logach."""

    kind = "checkout_failed"

    def __init__(self, message: str = "Nie udalo sie zlozyc zamowienia"):
        super().__init__(message)


class CartBusyError(StorefrontError):
    """Inna operacja na koszyku tego uzytkownika trzyma lock."""

    kind = "cart_busy"

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__("Koszyk jest modyfikowany przez inna operacje, sprobuj ponownie")
