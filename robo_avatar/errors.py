"""Exception hierarchy.

Only two failure kinds exist in the pipeline: the sprite atlas cannot be
loaded (fatal, raised at startup) and the final PNG encode fails (surfaced to
the caller of a single generation). Any input string yields a valid avatar,
so there is no per-input error class.
"""


class AvatarError(Exception):
    """Base class for all avatar generation failures."""


class AtlasError(AvatarError):
    """Sprite atlas is missing, undecodable or too small for the layer grid."""


class EncodeError(AvatarError):
    """Composited canvas could not be encoded to PNG."""
