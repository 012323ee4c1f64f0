from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()

class Artwork(db.Model):
    __tablename__ = 'artworks'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), default='')
    description = db.Column(db.Text, default='')
    filename = db.Column(db.String(255), nullable=False) # name inside UPLOAD_FOLDER
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)
    likes = db.Column(db.Integer, nullable=False, default=0)

    # Unique emails in first-comment order; bounds distinct commenters, not comments
    commenters = db.Column(db.JSON, nullable=False, default=list)

    comments = db.relationship('Comment', backref='artwork', cascade='all, delete-orphan',
                               order_by='Comment.id')

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title or '',
            'description': self.description or '',
            'filename': self.filename,
            'url': '/uploads/' + self.filename,
            'uploaded_at': self.uploaded_at.isoformat() if self.uploaded_at else None,
            'likes': self.likes or 0,
            'commenters': list(self.commenters or []),
            'comments': [c.to_dict() for c in self.comments]
        }

class Comment(db.Model):
    __tablename__ = 'comments'
    id = db.Column(db.Integer, primary_key=True)
    artwork_id = db.Column(db.Integer, db.ForeignKey('artworks.id'), nullable=False)
    email = db.Column(db.String(254), nullable=False)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'text': self.text,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }

def init_db(app):
    with app.app_context():
        db.create_all()
