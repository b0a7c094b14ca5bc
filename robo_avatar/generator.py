"""Avatar generation facade.

``AvatarGenerator`` ties the pipeline together for one shared atlas::

    text -> digest -> Selectors -> 5 LayerPlacements -> canvas -> PNG

Generation is synchronous and side-effect free. The atlas is the only shared
state and is never written, so one generator may serve any number of
concurrent callers. The module-level :func:`generate` uses a process-wide
generator whose atlas is loaded (or rendered) once per process.
"""

from dataclasses import dataclass
from functools import lru_cache
import time
from typing import Union

from pyrsistent.typing import PVector

from robo_avatar.atlas import SpriteAtlas, check_atlas_size, load_atlas
from robo_avatar.compositor import composite_layers, encode_png
from robo_avatar.config import AvatarConfig
from robo_avatar.fingerprint import Selectors, fingerprint
from robo_avatar.layers import LayerPlacement, resolve_layers
from robo_avatar.log import get_logger
from robo_avatar.sprites import build_atlas
from robo_avatar.types import RGBAArray

logger = get_logger(__name__)

ETAG_PREFIX = "robo-"


@dataclass(frozen=True)
class Avatar:
    """One generated avatar.

    Attributes:
        key: The input string the avatar was derived from.
        selectors: Bucketed style/color choices.
        png: Encoded image bytes.
    """

    key: str
    selectors: Selectors
    png: bytes

    @property
    def etag(self) -> str:
        """Stable cache key; the mapping from ``key`` to image is pure."""
        return f"{ETAG_PREFIX}{self.key}"


class AvatarGenerator:
    atlas: SpriteAtlas

    def __init__(self, atlas: SpriteAtlas):
        check_atlas_size(atlas)
        self.atlas = atlas

    def placements(self, text: Union[str, bytes]) -> PVector[LayerPlacement]:
        return resolve_layers(fingerprint(text))

    def render(self, text: Union[str, bytes]) -> RGBAArray:
        """Composite the avatar for ``text`` into a new RGBA array."""
        return composite_layers(self.atlas, self.placements(text))

    def generate(self, text: Union[str, bytes]) -> bytes:
        """Return PNG bytes for ``text``.

        Raises:
            EncodeError: The canvas could not be encoded.
        """
        return encode_png(self.render(text))

    def avatar(self, text: str) -> Avatar:
        selectors = fingerprint(text)
        logger.debug("avatar %r selectors=%s", text, selectors.as_tuple())
        canvas = composite_layers(self.atlas, resolve_layers(selectors))
        return Avatar(key=text, selectors=selectors, png=encode_png(canvas))


def load_configured_atlas(config: AvatarConfig) -> SpriteAtlas:
    """Atlas named by ``config``, or the built-in one when none is set.

    Raises:
        AtlasError: A configured atlas file cannot be used.
    """
    started = time.perf_counter()
    if config.atlas_path is not None:
        atlas = load_atlas(config.atlas_path)
        source = config.atlas_path
    else:
        atlas = build_atlas()
        source = "built-in"
    logger.info(
        "Sprite atlas %s ready (%dx%d) in %.2fs",
        source,
        atlas.width,
        atlas.height,
        time.perf_counter() - started,
    )
    return atlas


def create_generator(config: AvatarConfig) -> AvatarGenerator:
    """New generator over the atlas ``config`` selects; not cached.

    Raises:
        AtlasError: The configured atlas cannot be used.
    """
    return AvatarGenerator(load_configured_atlas(config))


@lru_cache(maxsize=1)
def default_generator() -> AvatarGenerator:
    """Process-wide generator for the environment's configuration.

    The atlas is loaded on the first call and shared afterwards. Services
    call this while starting so atlas errors stop the process there.
    """
    return create_generator(AvatarConfig.from_env())


def generate(text: Union[str, bytes]) -> bytes:
    """PNG bytes of the robot avatar for ``text`` using the default generator."""
    return default_generator().generate(text)
