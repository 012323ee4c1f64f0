from app import create_app
from models import Artwork, Comment
import storage

def verify(app=None):
    """Print a health report and return the storage mismatches."""
    app = app or create_app()
    with app.app_context():
        print("Starting verification...")
        print(f"Database URI: {app.config['SQLALCHEMY_DATABASE_URI']}")
        print(f"Upload folder: {app.config['UPLOAD_FOLDER']}")

        artworks = Artwork.query.order_by(Artwork.id).all()
        print(f"Artworks found: {len(artworks)} / {app.config['MAX_IMAGES']}")
        for a in artworks:
            print(f"  - #{a.id} {a.title!r}: {a.likes or 0} likes, "
                  f"{len(a.comments)} comments from {len(a.commenters or [])} commenters")
        print(f"Comments found: {Comment.query.count()}")

        report = storage.find_mismatches(app.config['UPLOAD_FOLDER'], [a.filename for a in artworks])
        if report['orphans']:
            print(f"Orphaned files (no record): {len(report['orphans'])}")
            for name in report['orphans']:
                print(f"  - {name}")
        if report['dangling']:
            print(f"Missing files (record without file): {len(report['dangling'])}")
            for name in report['dangling']:
                print(f"  - {name}")
        if not report['orphans'] and not report['dangling']:
            print("Storage and database agree.")
        return report

if __name__ == "__main__":
    verify()
