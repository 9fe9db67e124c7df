"""Taskboard — collaborative board backend with invitations and rule-based recommendations."""
