"""
FontOrganizerCore - metadata resolution and output path helpers for the
FontFiles_FamilyOrganizer tool.
"""

__version__ = "1.0.0"
