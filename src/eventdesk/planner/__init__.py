"""Planner domain -- events, tracks, tasks, meetings, and meeting notes.

Provides the data layer (SQLAlchemy models, Pydantic schemas,
PlannerRepository) and the meeting enrichment step used by the API.
"""
