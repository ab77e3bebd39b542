from datetime import datetime, timedelta

from parallax import db
from parallax.models.models import utcnow


class Expedition(db.Model):
    """A time-boxed team visit to a rift.

    ``completed``/``processed``/``claimed`` are independent flags. Completion is
    also a wall-clock predicate (see ``is_complete_at``); the flag is only
    written once rewards are claimed.
    """

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False, index=True)
    team_id = db.Column(db.Integer, db.ForeignKey("team.id"), nullable=False)
    rift_id = db.Column(db.Integer, db.ForeignKey("rift.id"), nullable=False)
    start_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    duration_minutes = db.Column(db.Integer, nullable=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    processed = db.Column(db.Boolean, nullable=False, default=False)
    claimed = db.Column(db.Boolean, nullable=False, default=False)

    team = db.relationship("Team")
    rift = db.relationship("Rift")

    @property
    def completion_time(self) -> datetime:
        return self.start_time + timedelta(minutes=self.duration_minutes)

    def is_complete_at(self, now: datetime) -> bool:
        return now >= self.completion_time

    def seconds_remaining(self, now: datetime) -> int:
        return max(0, int((self.completion_time - now).total_seconds()))

    def __repr__(self):
        return f"<Expedition {self.id} team={self.team_id} rift={self.rift_id} claimed={self.claimed}>"


class ExpeditionLoot(db.Model):
    """Append-only audit row: one per granted unit."""

    __tablename__ = "expedition_loot"
    id = db.Column(db.Integer, primary_key=True)
    expedition_id = db.Column(db.Integer, db.ForeignKey("expedition.id"), nullable=False, index=True)
    loot_item_id = db.Column(db.Integer, db.ForeignKey("loot_item.id"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    loot_item = db.relationship("LootItem", lazy="joined")
