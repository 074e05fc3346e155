from messageboard.extensions import db

class Message(db.Model):
    __tablename__ = "messages"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    # Never rendered; kept for the board owner only
    email = db.Column(db.String(255), nullable=True)
    website = db.Column(db.String(255), nullable=True)
    topic = db.Column(db.String(200), nullable=False)
    comment = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=db.func.now(), nullable=False)
    ip = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)

    __table_args__ = (
        db.Index("ix_messages_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<Message {self.id} {self.topic!r}>"
