"""
bizorm Model Options - behaviour flags of a model.
"""

from __future__ import annotations

from enum import IntFlag

__all__ = ["ModelOption"]


class ModelOption(IntFlag):
    """
    Bit set of model options.

    Attributes:
        MIXIN: Model only carries fields and methods for other models
        MANUAL: Storage is managed by hand, not by the schema synchroniser
        SYSTEM: Model is reserved to the framework
        TRANSIENT: Records are wiped on a regular basis
        MANY2MANY_LINK: Model is the link table of a many-to-many relation
    """

    NONE = 0
    MIXIN = 1 << 0
    MANUAL = 1 << 1
    SYSTEM = 1 << 2
    TRANSIENT = 1 << 3
    MANY2MANY_LINK = 1 << 4
