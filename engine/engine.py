import dataclasses
import logging
import math
from typing import Any, Generator, List, Optional, Tuple

from . import ballistics
from .config import MatchConfig
from .errors import MatchStateError, ValidationError
from .impact import check_impact, distance_2d, is_lethal
from .model import (Emplacement, Event, FiringParameters, Heightmap, ImpactOutcome,
                    MatchState, OutcomeKind, Phase, Projectile, Side)
from .placement import place_emplacements
from .rng import DRNG
from .terrain import carve_crater, generate_terrain

logger = logging.getLogger(__name__)

def parse_in_range(field: str, value: Any, bounds: Tuple[float, float]) -> float:
    """Coerce a number or numeric string, rejecting NaN and out-of-range values."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, value, bounds) from None
    lo, hi = bounds
    if math.isnan(number) or not lo <= number <= hi:
        raise ValidationError(field, value, bounds)
    return number

class Engine:
    """Match controller: owns one MatchState and advances it turn by turn.

    Phases run AWAITING_ANGLE -> AWAITING_POWER -> FIRING, then either back
    to AWAITING_ANGLE for the other player or to ROUND_OVER.
    """

    def __init__(self, seed: int, config: Optional[MatchConfig] = None,
                 initial_state: Optional[MatchState] = None):
        self.config = config or MatchConfig()
        self._rng = DRNG(seed)
        self._pending_events: List[Event] = []
        if initial_state is not None:
            self.state = initial_state
        else:
            self.new_match()

    # -- setup -------------------------------------------------------------

    def default_settings(self) -> List[FiringParameters]:
        return [FiringParameters(self.config.default_angle, self.config.default_power)
                for _ in range(2)]

    def new_match(self, width: Optional[int] = None, height: Optional[int] = None) -> MatchState:
        """Fresh terrain, fresh bases, coin toss for the first shooter.

        Any shot still in flight is discarded.
        """
        if width is not None or height is not None:
            self.config = dataclasses.replace(
                self.config,
                width=self.config.width if width is None else width,
                height=self.config.height if height is None else height,
            )
        cfg = self.config
        heightmap = generate_terrain(cfg.width, cfg, self._rng)
        emplacements = place_emplacements(heightmap, cfg, self._rng)
        first: Side = self._rng.coin()
        self.state = MatchState(
            heightmap=heightmap,
            emplacements=emplacements,
            current_player=first,
            phase=Phase.AWAITING_ANGLE,
            settings=self.default_settings(),
        )
        self._pending_events = [Event("MatchStarted", 0, {
            "width": cfg.width,
            "height": cfg.height,
            "first_player": first,
            "emplacements": [[e.x, e.y] for e in emplacements],
        })]
        logger.info("New match %dx%d, player %d starts (bases at x=%d, x=%d)",
                    cfg.width, cfg.height, first + 1, emplacements[0].x, emplacements[1].x)
        return self.state

    # -- input -------------------------------------------------------------

    def _require(self, phase: Phase) -> None:
        if self.state.phase is not phase:
            raise MatchStateError(f"expected phase {phase.value}, match is in {self.state.phase.value}")

    def submit_angle(self, value: Any) -> MatchState:
        """Accept the current player's angle; invalid input leaves the state untouched."""
        self._require(Phase.AWAITING_ANGLE)
        angle = parse_in_range("angle", value, self.config.angle_range)
        s = self.state
        s.settings[s.current_player] = FiringParameters(angle, s.settings[s.current_player].power)
        s.phase = Phase.AWAITING_POWER
        self._pending_events.append(Event("AngleAccepted", s.ts_ms,
                                          {"player": s.current_player, "angle": angle}))
        return s

    def submit_power(self, value: Any) -> MatchState:
        """Accept the current player's power and launch the shot."""
        self._require(Phase.AWAITING_POWER)
        power = parse_in_range("power", value, self.config.power_range)
        s = self.state
        firing = FiringParameters(s.settings[s.current_player].angle, power)
        s.settings[s.current_player] = firing
        s.projectile = ballistics.launch(s.shooter, firing, self.config)
        s.last_outcome = None
        s.phase = Phase.FIRING
        self._pending_events.append(Event("ShotFired", s.ts_ms, {
            "player": s.current_player,
            "angle": firing.angle,
            "power": firing.power,
            "start": list(s.projectile.start),
        }))
        logger.info("Player %d firing at %g deg with power %g",
                    s.current_player + 1, firing.angle, firing.power)
        return s

    # -- flight ------------------------------------------------------------

    def step(self) -> List[Event]:
        """Advance the shot in flight by one tick. Outside FIRING only pending events are returned."""
        evts, self._pending_events = self._pending_events, []
        return evts + self._tick()

    def _tick(self) -> List[Event]:
        s = self.state
        if s.phase is not Phase.FIRING or s.projectile is None:
            return []

        proj = s.projectile
        outcome = check_impact(proj.pos, s.heightmap, s.target, self.config,
                               target_side=1 - s.current_player)
        if outcome is not None:
            return self._resolve(outcome)

        evt = Event("ProjectileMoved", s.ts_ms, {"pos": list(proj.pos), "t": proj.elapsed})
        s.projectile = ballistics.step(proj, self.config.dt, self.config.gravity)
        s.ts_ms += int(round(self.config.dt * 1000))
        return [evt]

    def fly(self) -> Generator[Projectile, None, Optional[ImpactOutcome]]:
        """Pull-based flight: yields each in-flight projectile, returns the outcome.

        Events from the flight stay queued, in order, for the next step().
        """
        while self.state.phase is Phase.FIRING and self.state.projectile is not None:
            proj = self.state.projectile
            self._pending_events += self._tick()
            if self.state.phase is Phase.FIRING:
                yield proj
        return self.state.last_outcome

    def fire(self, angle: Any, power: Any) -> Optional[ImpactOutcome]:
        """Submit both inputs and run the shot to completion."""
        self.submit_angle(angle)
        self.submit_power(power)
        for _ in self.fly():
            pass
        return self.state.last_outcome

    # -- resolution --------------------------------------------------------

    def _resolve(self, outcome: ImpactOutcome) -> List[Event]:
        """Crater, lethality and turn hand-off, all before the next tick."""
        s = self.state
        cfg = self.config
        s.projectile = None
        s.last_outcome = outcome
        evts = [Event("Impact", s.ts_ms, {
            "player": s.current_player,
            "kind": outcome.kind.value,
            "pos": list(outcome.position) if outcome.position else None,
        })]

        if outcome.explodes:
            radius = cfg.effective_crater_radius
            s.heightmap = carve_crater(s.heightmap, outcome.position, radius, cfg.height)
            evts.append(Event("CraterCarved", s.ts_ms,
                              {"center": list(outcome.position), "radius": radius}))

            target = s.target
            lethal = (outcome.kind is OutcomeKind.DIRECT_HIT or
                      is_lethal(outcome.position, target, cfg.explosion_radius))
            if lethal:
                s.winner = s.current_player
                s.phase = Phase.ROUND_OVER
                evts.append(Event("RoundOver", s.ts_ms, {
                    "winner": s.winner,
                    "kind": outcome.kind.value,
                    "dist": distance_2d(outcome.position, target.center),
                }))
                logger.info("Player %d wins (%s)", s.winner + 1, outcome.kind.value)
                return evts

        logger.debug("Player %d missed (%s)", s.current_player + 1, outcome.kind.value)
        evts += self._switch_turn()
        return evts

    def _switch_turn(self) -> List[Event]:
        s = self.state
        s.current_player = 1 - s.current_player
        s.phase = Phase.AWAITING_ANGLE
        return [Event("TurnChanged", s.ts_ms, {"player": s.current_player})]

    # -- accessors ---------------------------------------------------------

    def heightmap(self) -> Heightmap:
        return self.state.heightmap

    def emplacements(self) -> Tuple[Emplacement, Emplacement]:
        return self.state.emplacements

    def winner(self) -> Optional[Side]:
        return self.state.winner

    def snapshot(self) -> MatchState:
        """Return current state."""
        return self.state
