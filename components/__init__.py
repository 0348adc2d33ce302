"""components — Trail data records, organised by domain.

Submodules
----------
party      PartyMember, Settings, default family / inventory / epitaphs
trail      Modifiers, WeatherToday, WeatherBook, ConditionInstance,
           StatusBook, Buff, DaySummary
catalog    WeatherPattern, ConditionDef, StatusConfig, AnimalDef,
           Landmark, ShopItem
events     EventDef, StageDef, ChoiceDef, Requirements, When,
           effect records, EventSession and render views

All public names are re-exported here so code can simply do
``from components import PartyMember``.
"""

# ── Party ────────────────────────────────────────────────────────────
from components.party import (
    PartyMember, Settings, MAX_HEALTH,
    default_party, default_inventory, default_epitaphs,
)

# ── Per-day trail state ──────────────────────────────────────────────
from components.trail import (
    Modifiers, WeatherToday, WeatherBook, ConditionEffects,
    ConditionInstance, StatusBook, Buff, DaySummary,
)

# ── Catalog records ──────────────────────────────────────────────────
from components.catalog import (
    WeatherPattern, ConditionDef, StatusConfig, AnimalDef, Landmark, ShopItem,
)

# ── Events ───────────────────────────────────────────────────────────
from components.events import (
    EventDef, StageDef, ChoiceDef, Requirements, When,
    Effect, InventoryEffect, MoneyEffect, HealthEffect, StatusEffect,
    TimeEffect, DistanceEffect, MapFlagEffect, RiskBuffEffect,
    MoraleEffect, MortalityEffect, RollEffect, RollOption, UnknownEffect,
    parse_effect, EventSession, StageView, ChoiceView, ChoiceResult,
)

__all__ = [
    # party
    "PartyMember", "Settings", "MAX_HEALTH",
    "default_party", "default_inventory", "default_epitaphs",
    # trail
    "Modifiers", "WeatherToday", "WeatherBook", "ConditionEffects",
    "ConditionInstance", "StatusBook", "Buff", "DaySummary",
    # catalog
    "WeatherPattern", "ConditionDef", "StatusConfig", "AnimalDef",
    "Landmark", "ShopItem",
    # events
    "EventDef", "StageDef", "ChoiceDef", "Requirements", "When",
    "Effect", "InventoryEffect", "MoneyEffect", "HealthEffect", "StatusEffect",
    "TimeEffect", "DistanceEffect", "MapFlagEffect", "RiskBuffEffect",
    "MoraleEffect", "MortalityEffect", "RollEffect", "RollOption", "UnknownEffect",
    "parse_effect", "EventSession", "StageView", "ChoiceView", "ChoiceResult",
]
