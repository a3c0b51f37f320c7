"""Fatal startup errors. Everything that happens per tick is normal control flow."""


class BannerVisError(Exception):
    """Base class for bannervis errors."""


class ResourceUnavailable(BannerVisError):
    """The shared visualisation buffer could not be opened or mapped."""


class TransformSetupFailure(BannerVisError):
    """The analysis stage could not be set up (bad FFT size or band layout)."""
