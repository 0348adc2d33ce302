"""data — Authored trail catalogs and tuning (TOML), shipped with the package."""
