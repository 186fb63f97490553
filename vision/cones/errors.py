class ConfigError(ValueError):
    """Invalid startup configuration (ROI, HSV range, steering bounds...)."""


class FrameSourceError(RuntimeError):
    """Frame source could not be opened or went away."""
