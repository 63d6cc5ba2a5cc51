"""Errors raised by the translation API."""


class NotTranslatableAttribute(Exception):
    """Raised when an explicit translation call names an undeclared attribute."""

    def __init__(self, attribute: str, model):
        self.attribute = attribute
        self.model = model if isinstance(model, type) else type(model)
        super().__init__(
            f"Attribute '{attribute}' is not translatable on {self.model.__name__}"
        )
