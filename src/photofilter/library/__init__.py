"""Photo storage collaborators.

Import :mod:`.photo_library` for the storage classes and :mod:`.results` for
the values they exchange.
"""
