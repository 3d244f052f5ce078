from __future__ import annotations

from ellarises.models.person import Milestone, Person  # noqa: F401
from ellarises.models.event import Event, EventOccurrence, Registration  # noqa: F401
from ellarises.models.donation import Donation  # noqa: F401
