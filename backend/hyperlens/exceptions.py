"""
PURPOSE: Domain exceptions raised by HyperLens services and mapped to HTTP
responses by the application exception handlers.
"""


class HyperLensError(Exception):
    """Base class for all HyperLens domain errors."""

    status_code: int = 400


class InvalidWalletAddress(HyperLensError):
    """Raised when a wallet address does not have the 0x + 40 hex shape."""

    def __init__(self, address: str):
        super().__init__(f"Valid wallet address required, got {address!r}")
        self.address = address


class UpstreamError(HyperLensError):
    """Raised when a Hyperliquid endpoint fails or returns an unusable payload."""

    status_code = 502

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class ResolutionCancelled(HyperLensError):
    """Raised by the resolver when its cancellation token fired mid-resolution."""

    status_code = 409


class InvalidStateTransition(HyperLensError):
    """Raised when the search session is asked to move between unconnected states."""

    status_code = 409

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot move search session from {current} to {target}")
        self.current = current
        self.target = target
