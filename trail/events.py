"""trail/events.py — Multi-stage trail events.

Every few days ``maybe_trigger_event`` may open an event: a weighted,
condition-gated pick from the events catalog.  The caller then loops::

    ev = engine.maybe_trigger_event(session)
    while ev:
        view = engine.render_stage(ev, session)      # title, text, choices
        if engine.choose(ev, picked_id, session).done:
            break

The open event is mirrored on ``session.active_event`` as
``{eventId, stageId, childId}`` so a reload can ``resume_event`` at the
same stage with the same child.
"""

from __future__ import annotations

from components.events import (
    CONTINUE_CHOICE, ChoiceDef, ChoiceResult, ChoiceView, EventDef,
    EventSession, StageDef, StageView,
)
from core import tuning
from core.catalogs import Catalogs
from core.rng import weighted_pick
from core.session import GameSession
from trail.effects import apply_effects


def _fmt(n: float) -> str:
    return f"{n:g}"


class EventEngine:
    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    # ── Selection ────────────────────────────────────────────────────

    def is_eligible(self, event: EventDef, session: GameSession) -> bool:
        w = event.when
        if w.min_day is not None and session.day < w.min_day:
            return False
        if w.max_day is not None and session.day > w.max_day:
            return False
        if w.mile_gte is not None and session.miles < w.mile_gte:
            return False
        if w.mile_lt is not None and session.miles >= w.mile_lt:
            return False
        if w.if_flag and not session.flags.get(w.if_flag):
            return False
        if w.if_flag_missing and session.flags.get(w.if_flag_missing):
            return False
        if w.food_lt is not None and not session.item("food") < w.food_lt:
            return False
        if w.bullets_gte is not None and not session.item("bullets") >= w.bullets_gte:
            return False
        if w.medicine_gte is not None and not session.item("medicine") >= w.medicine_gte:
            return False
        return True

    def maybe_trigger_event(self, session: GameSession) -> EventSession | None:
        flags = session.flags
        cooldown = int(flags.get("evtCooldownDays") or 0)
        if cooldown > 0:
            flags["evtCooldownDays"] = cooldown - 1
            session.save()
            return None

        eligible = [e for e in self.catalogs.events() if self.is_eligible(e, session)]
        event = weighted_pick(session.rng, eligible, lambda e: e.weight)
        if event is None:
            flags["evtCooldownDays"] = 1
            session.save()
            return None

        ev = self._open(session, event)
        base = int(tuning.get("events", "cooldown_min", 3))
        spread = int(tuning.get("events", "cooldown_spread", 4))
        flags["evtCooldownDays"] = base + session.rng.next_int(spread)
        session.log_line(f"Event: {event.title}")
        session.active_event = ev.to_ref()
        session.save()
        return ev

    def _open(self, session: GameSession, event: EventDef) -> EventSession:
        kids = session.living_children()
        child = kids[session.rng.next_int(len(kids))] if kids else None
        start = event.stages[0].id if event.stages else "start"
        return EventSession(event=event, stage_id=start, vars={"child": child})

    def resume_event(self, session: GameSession) -> EventSession | None:
        """Rebuild the in-progress event saved on the session, if any."""
        ref = session.active_event
        if not ref:
            return None
        event = self.catalogs.event_by_id(str(ref.get("eventId", "")))
        if event is None:
            print(f"[EVENT] saved event {ref.get('eventId')!r} no longer exists; dropping it")
            session.active_event = None
            return None
        child = session.find_member(str(ref.get("childId") or ""))
        if child is not None and not child.alive:
            child = None
        stage_id = str(ref.get("stageId") or (event.stages[0].id if event.stages else "start"))
        return EventSession(event=event, stage_id=stage_id, vars={"child": child})

    # ── Stages ───────────────────────────────────────────────────────

    def find_stage(self, ev: EventSession) -> StageDef:
        stages = ev.event.stages
        for st in stages:
            if st.id == ev.stage_id:
                return st
        if stages:
            return stages[0]
        return StageDef(id=ev.stage_id)

    def missing_requirements(self, choice: ChoiceDef, session: GameSession) -> list[str]:
        req = choice.requires
        msgs: list[str] = []
        if req.money_gte is not None and not session.money >= req.money_gte:
            msgs.append(f"Requires ${_fmt(req.money_gte)}")
        for item, need in req.inventory_gte:
            if not session.item(item) >= need:
                msgs.append(f"Requires {item} ×{_fmt(need)}")
        return msgs

    def render_stage(self, ev: EventSession, session: GameSession) -> StageView:
        stage = self.find_stage(ev)
        child = ev.vars.get("child")
        text = stage.text.replace("{child}", child.name if child else "a child")
        choices = stage.choices or (CONTINUE_CHOICE,)
        views = []
        for ch in choices:
            missing = self.missing_requirements(ch, session)
            views.append(ChoiceView(id=ch.id, label=ch.label, disabled=bool(missing),
                                    reason=", ".join(missing), goto=ch.goto))
        return StageView(title=ev.event.title, text=text, choices=views)

    def choose(self, ev: EventSession, choice_id: str, session: GameSession) -> ChoiceResult:
        stage = self.find_stage(ev)
        choice = next((c for c in stage.choices if c.id == choice_id), None)
        if choice is None and choice_id == CONTINUE_CHOICE.id:
            choice = CONTINUE_CHOICE
        if choice is None:
            self._close(session)
            return ChoiceResult(done=True)

        if self.missing_requirements(choice, session):
            ev.logs.append("Choice requirements not met.")
            return ChoiceResult(done=False)

        apply_effects(choice.effects, session, ev)

        if choice.goto and choice.goto != "end":
            ev.stage_id = choice.goto
            session.active_event = ev.to_ref()
            session.save()
            return ChoiceResult(done=False)
        self._close(session)
        return ChoiceResult(done=True)

    def _close(self, session: GameSession) -> None:
        session.active_event = None
        session.save()
