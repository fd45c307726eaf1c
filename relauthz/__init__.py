"""Relationship-based authorization layer backed by SpiceDB."""
