"""Erreurs metier / Domain errors raised by the record service."""


class RecordError(Exception):
    """Erreur de base / Base error for record operations."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(RecordError):
    """Donnees client invalides / Client data fails a documented constraint."""

    status_code = 400

    def __init__(self, messages: list[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))

    def to_dict(self) -> dict:
        return {"errors": self.messages, "error": self.message}


class NotFoundError(RecordError):
    """Enregistrement introuvable / Referenced record does not exist."""

    status_code = 404


class StorageError(RecordError):
    """Echec du stockage / Underlying store operation failed."""

    status_code = 500
