"""Player identity from the hosting platform."""
import logging
import random
from typing import Optional

from minisweeper.types import Player

logger = logging.getLogger(__name__)


def resolve_player(context: Optional[dict], rng: Optional[random.Random] = None) -> Player:
    """Build a Player from a host context of the form {'fid': int, 'username': str}.

    Outside the host (no context or no fid) a demo identity is returned.
    """
    if context and isinstance(context.get('fid'), int) and not isinstance(context.get('fid'), bool):
        fid = context['fid']
        return Player(user_fid=fid, username=context.get('username') or f"User {fid}")

    logger.info("Running outside host context, using demo identity")
    rng = rng or random.Random()
    return Player(user_fid=rng.randrange(1, 10000), username='Demo User')
