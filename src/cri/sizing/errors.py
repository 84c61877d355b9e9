class SizesParseError(ValueError):
    """Raised when the host sizes string does not end in a ', <digits>px' width."""
    pass

class SectionDefinitionError(ValueError):
    """Raised when a section literal cannot be coerced into a SectionDefinition."""
    pass
