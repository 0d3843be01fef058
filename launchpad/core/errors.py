# launchpad/core/errors.py

# -----------------------------
# Base Errors
# -----------------------------

class LaunchpadError(Exception):
    """Base class for all launchpad errors."""
    pass


# -----------------------------
# Service Process Errors
# -----------------------------

class InvalidShutdownTransition(LaunchpadError):
    """Illegal shutdown state transition attempted."""
    pass


class ListenerBindError(LaunchpadError):
    """Listener could not bind its address (port in use, no privilege)."""

    def __init__(self, host: str, port: int, reason: str):
        super().__init__(f"Cannot bind {host}:{port}: {reason}")
        self.host = host
        self.port = port
        self.reason = reason


class ListenerClosedError(LaunchpadError):
    """Listener stopped serving before shutdown was requested."""
    pass


# -----------------------------
# Topology Errors
# -----------------------------

class TopologyError(LaunchpadError):
    """Structurally invalid topology declaration."""
    pass


class DuplicateResourceError(TopologyError):
    pass


class UnknownDependencyError(TopologyError):
    pass


class TopologyShapeError(TopologyError):
    """The graph does not end in a single service."""
    pass


class DependencyCycleError(TopologyError):
    def __init__(self, logical_ids):
        self.logical_ids = sorted(logical_ids)
        super().__init__(
            f"Dependency cycle between: {', '.join(self.logical_ids)}"
        )
