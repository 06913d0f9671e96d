"""Per-version fixture task sets.

Importing a version module registers its tasks in the default task
registry; ``task_set()`` returns them in execution order.
"""

from fixturespine.migration.versions import v004, v005

__all__ = ["v004", "v005"]
