"""
main.py — Headless trail autoplay

1. Start (or continue) a seeded game
2. Each day: cross a hazard if parked, hunt if food is short, else travel
3. Resolve any event by taking the first available choice
4. Print the trail log as it grows, then the final score

    python main.py --seed 42 --days 60
"""

import argparse

from core.catalogs import Catalogs
from core.save import MemoryStore, SaveError, SlotStore
from core.session import GameSession
from trail.engine import TrailEngine


def _pick_crossing(engine: TrailEngine, landmark, waited: int) -> str:
    state = engine.get_hazard_state(landmark)
    odds = {m: state.estimate_success(m) or 0.0 for m in ("drive", "prep")}
    best = max(odds, key=odds.get)
    if odds[best] >= 0.6:
        return best
    if engine.session.money >= 35:
        return "service"
    if waited < 2:
        return "wait"
    return "detour"


def _hunt(engine: TrailEngine) -> None:
    hunt = engine.create_hunt_session(width=640, height=360, duration_sec=15)
    now_ms = 0.0
    while hunt.state.time_left > 0 and engine.session.item("bullets") > 0:
        hunt.update(0.05)
        now_ms += 50
        if hunt.state.creatures:
            target = hunt.state.creatures[0].rect
            hunt.shoot(target.centerx, target.centery, now_ms)
    engine.finish_hunt(hunt)


def _resolve_event(engine: TrailEngine, ev) -> None:
    for _ in range(10):
        view = engine.render_stage(ev)
        choice = next((c for c in view.choices if not c.disabled), view.choices[0])
        if engine.choose(ev, choice.id).done:
            return


def autoplay(engine: TrailEngine, days: int) -> None:
    session = engine.session
    printed = 0
    waited = 0

    ev = engine.resume_event()
    if ev:
        _resolve_event(engine, ev)

    for _ in range(days):
        if engine.check_game_over():
            break
        parked = engine.blocked_at()
        if parked is not None:
            method = _pick_crossing(engine, parked, waited)
            waited = waited + 1 if method == "wait" else 0
            engine.try_method(parked, method)
        elif (session.item("food") < session.alive_count() * 6
              and session.item("bullets") > 0 and engine.can_hunt_today()):
            _hunt(engine)
            engine.apply_rest_day()
        else:
            engine.travel()

        ev = engine.maybe_trigger_event()
        if ev:
            _resolve_event(engine, ev)

        for line in session.log[printed:]:
            print(line)
        printed = len(session.log)

    outcome = engine.check_game_over() or "still on the trail"
    score = engine.compute_score()
    print(f"\n=== Day {session.day}, mile {session.miles:.0f}: {outcome} ===")
    print(f"Score {score.total} (miles {score.base}, survivors {score.alive_bonus}, "
          f"cash {score.cash_bonus}, supplies {score.supplies_value}, "
          f"late -{score.day_penalty}, graves -{score.casualty_penalty})")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Canadian Trail headless autoplay")
    parser.add_argument("--seed", type=int, default=None, help="new-game seed (random if omitted)")
    parser.add_argument("--days", type=int, default=60, help="maximum days to play")
    parser.add_argument("--slot", type=int, default=0, help="save slot")
    parser.add_argument("--continue", dest="cont", action="store_true",
                        help="continue the game saved in --slot")
    parser.add_argument("--no-save", action="store_true", help="keep the game in memory only")
    args = parser.parse_args(argv)

    store = MemoryStore() if args.no_save else SlotStore(args.slot)
    if args.cont:
        try:
            session = GameSession.continue_game(store)
        except SaveError as ex:
            print(f"[SAVE] {ex}")
            return 1
    else:
        session = GameSession.new_game(seed=args.seed, store=store)

    catalogs = Catalogs()
    catalogs.preload()
    for err in catalogs.errors:
        print(f"[CATALOG] {err}")

    autoplay(TrailEngine(session, catalogs), args.days)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
