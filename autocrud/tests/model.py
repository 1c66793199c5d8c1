from autocrud.datatypes import Date, String
from autocrud.model import Field, Model
from autocrud.tests.db import articles_t, users_t


class UserModel(Model):
    table = users_t
    fields = 'username', 'age'


class ArticleModel(Model):
    table = articles_t
    fields = ('slug', 'title', 'rating', 'meta',
              Field('published', 'published_on', data_type=Date),
              Field('draft', articles_t.c.is_draft),
              Field('headline', 'title', data_type=String))
