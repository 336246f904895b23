"""Data module - practice records and their CRUD routes."""
from practice.data import models, routes

__all__ = ["models", "routes"]
