#!/usr/bin/env python

from setuptools import setup, find_packages

setup(
    name='pg-autocrud',
    version='0.1.0.dev0',
    description='Generate REST CRUD routes for PostgreSQL backed models',
    packages=find_packages(include=['autocrud', 'autocrud.*']),
    python_requires='>=3.9',
    keywords='crud rest quart marshmallow sqlalchemy asyncpg',
    install_requires=[
        'sqlalchemy[asyncio]>=2.0',
        'asyncpg',
        'marshmallow>=3.18',
        'werkzeug',
        'quart>=0.19',
        'inflection',
        'sqlparse',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'faker',
            'aiosqlite',
        ],
    },
)
