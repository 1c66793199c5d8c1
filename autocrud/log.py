import os
import logging

import sqlparse
from sqlalchemy.dialects import postgresql

log_format = '[autocrud] %(message)s'

logging.basicConfig(format=log_format)

logger = logging.getLogger('autocrud')

if 'AUTOCRUD_DEBUG' in os.environ:
    logger.setLevel(logging.INFO)

_dialect = postgresql.dialect()


def log_query(query):
    logger.info(sqlparse.format(str(query.compile(dialect=_dialect)), reindent=True, keyword_case='upper'))
