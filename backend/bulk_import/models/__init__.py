from bulk_import.models.make import Make

__all__ = [
    "Make",
]
