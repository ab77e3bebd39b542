from parallax import db

DIFFICULTIES = ("tutorial", "easy", "medium", "hard", "legendary")


class Rift(db.Model):
    """Catalog expedition destination."""

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    world_type = db.Column(db.String(20), nullable=False)
    duration_minutes = db.Column(db.Integer, nullable=False)
    difficulty = db.Column(db.String(20), nullable=False, default="easy")
    weak_to_element = db.Column(db.String(20), nullable=False, default="none")
    unlock_requirement_text = db.Column(db.String(200), nullable=True)
    icon = db.Column(db.String(120), nullable=False, default="")

    drop_table = db.relationship("LootDropTable", back_populates="rift", order_by="LootDropTable.id")

    def __repr__(self):
        return f"<Rift {self.id} {self.name} {self.world_type}/{self.difficulty}>"


class LootDropTable(db.Model):
    """Per rift, per rarity: chance to drop and how many units when it does."""

    __tablename__ = "loot_drop_table"
    id = db.Column(db.Integer, primary_key=True)
    rift_id = db.Column(db.Integer, db.ForeignKey("rift.id"), nullable=False, index=True)
    rarity = db.Column(db.String(20), nullable=False)
    drop_rate_percent = db.Column(db.Float, nullable=False)
    min_quantity = db.Column(db.Integer, nullable=False, default=1)
    max_quantity = db.Column(db.Integer, nullable=False, default=1)

    rift = db.relationship("Rift", back_populates="drop_table")
    __table_args__ = (db.UniqueConstraint("rift_id", "rarity", name="uq_drop_rift_rarity"),)
