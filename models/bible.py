from mongoengine import Document, StringField, IntField, ListField, DateTimeField
from datetime import datetime

from utils.classifier import CATEGORIES


class BibleVerse(Document):
    reference = StringField(required=True, unique=True)
    text = StringField(required=True)
    book = StringField(required=True)
    chapter = IntField(required=True, min_value=1)
    verse = IntField(required=True, min_value=1)
    keywords = ListField(StringField(), default=list)
    themes = ListField(StringField(), default=list)
    category = StringField(required=True, choices=CATEGORIES, default='other')
    testament = StringField(required=True, choices=('old', 'new'))
    search_text = StringField(default='')
    usage_count = IntField(default=0, min_value=0)
    last_used = DateTimeField()
    created_at = DateTimeField(default=datetime.utcnow)
    updated_at = DateTimeField(default=datetime.utcnow)

    meta = {
        'collection': 'bible_verses',
        'indexes': [
            'book',
            'category',
            'testament',
            '-usage_count',
            ('book', 'chapter', 'verse'),
            ('themes', 'category'),
            {
                'fields': ['$search_text'],
                # Korean text: no stemming or stop words
                'default_language': 'none'
            }
        ]
    }

    def save(self, *args, **kwargs):
        self.updated_at = datetime.utcnow()
        return super(BibleVerse, self).save(*args, **kwargs)

    def to_json(self):
        return {
            "id": str(self.id) if self.id else None,
            "reference": self.reference,
            "text": self.text,
            "book": self.book,
            "chapter": self.chapter,
            "verse": self.verse,
            "themes": list(self.themes),
            "category": self.category,
            "testament": self.testament,
            "usage_count": self.usage_count,
            "last_used": self.last_used.isoformat() if self.last_used else None
        }
