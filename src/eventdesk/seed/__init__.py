"""Seed data migration from mock JSON files into the planner store."""
