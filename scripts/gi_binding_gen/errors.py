"""
Error types

Every generation-time failure aborts the namespace being generated.
"""


class GenerationError(Exception):
    """Base class for fatal generation errors"""


class UnresolvableReferenceError(GenerationError):
    """A referenced name is missing from the catalog"""

    def __init__(self, name):
        self.name = name
        super().__init__(f'Did not find {name} in input.')


class ConversionError(GenerationError):
    """No known conversion between a safe and a wire representation"""

    def __init__(self, safe: str, wire: str):
        self.safe = safe
        self.wire = wire
        super().__init__(f"don't know how to convert {safe} to {wire}")


class NamingError(GenerationError):
    """Empty or malformed identifier"""


class HierarchyError(GenerationError):
    """Malformed object hierarchy (e.g. a parent cycle)"""
