"""Exception hierarchy for partialtreelib.

Only misconfiguration raises. Dead ends during traversal, unmarked ids and
empty renders are normal outcomes and are reported through return values.
"""


class HierarchyError(Exception):
    """Base class for all partialtreelib errors."""
    pass


class ConfigurationError(HierarchyError):
    """Raised when a marking or render configuration is invalid."""
    pass


class ChildFetchUnavailableError(ConfigurationError):
    """Raised when children cannot be fetched for a node.

    Either the requested children variant is not one of the known variants,
    or the adapter has no way to list children for the node's type.
    Continuing would silently under-render the tree, so this is fatal.
    """

    def __init__(self, message: str, node=None, variant=None):
        super().__init__(message)
        self.node = node
        self.variant = variant
