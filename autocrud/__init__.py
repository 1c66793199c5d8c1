"""
Generate REST CRUD routes for PostgreSQL backed models.
"""
