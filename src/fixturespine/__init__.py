"""
fixture-spine: versioned fixture migrations and seeding for a publishing app.

Quick start::

    from fixturespine.migration import MigrationContext, update_fixtures
    from fixturespine.store import MemoryStore

    store = MemoryStore()
    await update_fixtures(["004", "005"], MigrationContext(store=store))

Packages
--------
core        errors, logging, settings, store protocols
store       in-memory Store Interface implementation
fixtures    fixture registry, reconciler, populate engine, default settings
migration   task model, sequencer, version registry, runner, version task sets
"""

__version__ = "0.1.0"
