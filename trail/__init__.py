"""trail — The day-by-day trail simulation.

Every engine takes the ``Catalogs`` context at construction and the
``GameSession`` on each call; all randomness comes from ``session.rng``.

Submodules
----------
weather     WeatherRoller — one weighted pattern per in-game day
status      StatusTracker — condition acquire/expire lifecycle
travel      DayResolver — travel and rest day resolution, buffs
effects     Typed event-effect dispatcher, target resolution
events      EventEngine — gated selection and multi-stage event graphs
hazards     River/Mud/Snow/Geese/Beaver crossings, HazardResolver
hunting     HuntSession — fixed-step hunting mini-game
journey     Route (landmarks), travel_day, check_game_over
shop        Frontier shop pricing and purchases
scoring     End-of-journey score breakdown
engine      TrailEngine — façade wiring all of the above
"""
