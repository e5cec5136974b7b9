# traitgen/errors.py


class TraitgenError(Exception):
    """Base class for errors raised at the traitgen API boundary."""


class ConfigurationError(TraitgenError):
    """Bad generation settings or an unknown saved config."""


class CapacityError(ConfigurationError):
    """
    Requested collection size exceeds what duplicate avoidance can deliver.

    Raised before any sampling, so no partial collection is lost.
    """

    def __init__(self, requested, available):
        super().__init__(
            f"Requested {requested} unique combinations but only {available} are possible."
        )
        self.requested = requested
        self.available = available


class IncompleteCollectionError(TraitgenError):
    """
    Generation ended with fewer combinations than requested.

    The partial collection is kept on the exception (and on the session) so
    nothing already generated is lost.
    """

    def __init__(self, requested, combinations):
        super().__init__(f"Generated only {len(combinations)} of {requested} requested combinations.")
        self.requested = requested
        self.combinations = combinations
