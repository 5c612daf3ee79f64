from saloon_directory.db.models.stable import StableCell, StableEntry

__all__ = ["StableCell", "StableEntry"]
