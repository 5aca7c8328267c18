from fantasy_auction.domain.projection import PlayerProjection, PlayerType
from fantasy_auction.domain.valuation import PlayerValue


def make_value(
    key: str,
    original_value: float,
    positions: tuple[str, ...] = ("OF",),
    player_type: PlayerType = PlayerType.HITTER,
) -> PlayerValue:
    return PlayerValue(
        key=key,
        projection=PlayerProjection(name=f"Player {key}", positions=positions, external_id=key),
        player_type=player_type,
        original_value=original_value,
        adjusted_value=original_value,
    )
